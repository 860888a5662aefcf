"""
Upload Orchestrator - performs one logical document upload.
Resolves the locations, uploads to the remote drive and records the result.
"""
from typing import Any, Mapping, Optional, Union

from .database import MetadataStoreInterface
from .location_resolver import LocationResolver
from .storage import RemoteStorageInterface
from ..core.logging_config import get_logger
from ..domain import (
    CaseAttachmentContext,
    DocumentType,
    FileLinkage,
    FileMetadataEntry,
    LocalFileUri,
    UploadContext,
    context_from_dict,
    parse_document_type,
)

logger = get_logger(__name__)


def linkage_for(
    document_type: DocumentType,
    context: UploadContext,
    local_file_uri: Optional[LocalFileUri] = None
) -> FileLinkage:
    """Case attachments belong to their case; other documents derive from their source resource."""
    if isinstance(context, CaseAttachmentContext):
        return FileLinkage(document_type=document_type, case_id=context.case_id, local_file_uri=local_file_uri)
    return FileLinkage(document_type=document_type, source_id=context.resource_id, local_file_uri=local_file_uri)


class UploadOrchestrator:
    """Combines the location resolver, a remote storage client and the metadata store."""

    def __init__(self, resolver: LocationResolver):
        self.resolver = resolver

    async def upload(
        self,
        document_type: Union[DocumentType, str],
        context: Union[UploadContext, Mapping[str, Any]],
        content: bytes,
        size: int,
        remote_client: RemoteStorageInterface,
        metadata_store: MetadataStoreInterface,
        local_file_uri: Optional[LocalFileUri] = None
    ) -> FileMetadataEntry:
        """
        Upload a document to its canonical location and record it.

        Copies to secondary locations are best effort: their failure is logged,
        never raised, and they are not recorded in the metadata store.

        Args:
            document_type: DocumentType or its string value
            context: Context variant (or mapping) the location rule needs
            content: File content
            size: Size of the content in bytes
            remote_client: Storage adapter acting for the current user
            metadata_store: Store the uploaded file gets recorded in
            local_file_uri: URI of the dropped file this upload replaces, if any

        Returns:
            The metadata entry of the canonical upload
        """
        doc_type = parse_document_type(document_type)
        if isinstance(context, Mapping):
            context = context_from_dict(doc_type, context)

        canonical, *copies = await self.resolver.resolve(doc_type, context)

        record = await remote_client.upload_file(canonical.directory_path, canonical.file_name, content, size)
        entry = await metadata_store.insert_uploaded_file(record, linkage_for(doc_type, context, local_file_uri))
        logger.info(f"Uploaded {doc_type.value} to {canonical.full_path} as file {entry.id}")

        for location in copies:
            try:
                await remote_client.upload_file(location.directory_path, location.file_name, content, size)
                logger.info(f"Uploaded untracked copy of {doc_type.value} to {location.full_path}")
            except Exception as e:
                logger.warning(f"Failed to upload copy of {doc_type.value} to {location.full_path}: {e}", exc_info=True)

        return entry
