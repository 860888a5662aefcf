"""
Dropped File Uploader - uploads one file from the drop directory.
Used by FileDropHandler to process queued files.
"""
import asyncio
from pathlib import Path

from .database import MetadataStoreInterface
from .sessions import SessionProviderInterface
from .storage import RemoteStorageFactory
from .upload_orchestrator import UploadOrchestrator
from ..api.exceptions import NoActiveSession, ResourceLookupFailed
from ..core.logging_config import get_logger
from ..domain import share_uri

logger = get_logger(__name__)


class DroppedFileUploader:
    """
    Uploads a dropped file on behalf of the user who created it.

    The document type and context come from the metadata registered for the
    file's share:// URI; the upload replaces that local file record.
    """

    def __init__(
        self,
        db_service: MetadataStoreInterface,
        session_provider: SessionProviderInterface,
        storage_factory: RemoteStorageFactory,
        orchestrator: UploadOrchestrator
    ):
        self.db_service = db_service
        self.session_provider = session_provider
        self.storage_factory = storage_factory
        self.orchestrator = orchestrator

    async def __call__(self, file_path: Path) -> None:
        """
        Upload a dropped file, raising on any failure.

        Raises:
            ResourceLookupFailed: if nothing is registered for the file
            NoActiveSession: if the file's creator has no active session
        """
        file_uri = share_uri(file_path.name)
        dropped = await self.db_service.get_dropped_file(file_uri)
        if dropped is None:
            raise ResourceLookupFailed(f"No file registered for {file_uri}")

        session = await self.session_provider.get_active_session_for_creator(file_uri)
        if session is None:
            raise NoActiveSession(
                f"No active session with a valid access token found for creator of file {file_uri}. "
                f"Unable to upload the file to the cloud."
            )

        def _read():
            return file_path.read_bytes()

        loop = asyncio.get_running_loop()
        content = await loop.run_in_executor(None, _read)

        remote_client = self.storage_factory.for_session(session)
        try:
            entry = await self.orchestrator.upload(
                dropped.document_type,
                dropped.context,
                content,
                len(content),
                remote_client,
                self.db_service,
                local_file_uri=file_uri
            )
        finally:
            await remote_client.close()
        logger.info(f"Synchronized dropped file {file_path.name} as file {entry.id}")
