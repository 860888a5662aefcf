"""
File service - removal and download of documents that were uploaded before.
"""
from .database import MetadataStoreInterface
from .storage import RemoteStorageInterface
from ..api.exceptions import DocumentNotFoundError, RemoteDeleteFailed
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class FileService:
    """
    Handles documents by their local file ID.
    The metadata store is the source of truth for whether a file is still attached.
    """

    def __init__(self, db_service: MetadataStoreInterface):
        self.db_service = db_service

    async def delete_document(self, file_id: str, remote_client: RemoteStorageInterface) -> None:
        """
        Delete a document from the remote drive and remove its metadata.

        A failing remote delete is logged and does not block removing the metadata.

        Raises:
            DocumentNotFoundError: if no remote file is recorded for the ID
        """
        remote_id = await self.db_service.get_remote_id(file_id)
        if remote_id is None:
            logger.info(f"No remote file ID found for file with id {file_id}")
            raise DocumentNotFoundError(f"File {file_id} not found")

        try:
            await remote_client.delete_file(remote_id)
        except RemoteDeleteFailed as e:
            logger.warning(f"Failed to delete file {file_id} from drive, but will still remove its metadata: {e}")

        await self.db_service.delete_file(file_id)
        logger.info(f"Deleted file {file_id}")

    async def get_download_url(self, file_id: str, remote_client: RemoteStorageInterface) -> str:
        """
        Get a download URL for a document.

        Raises:
            DocumentNotFoundError: if the file is unknown locally or on the remote drive
        """
        remote_id = await self.db_service.get_remote_id(file_id)
        if remote_id is None:
            logger.info(f"No remote file ID found for file with id {file_id}")
            raise DocumentNotFoundError(f"File {file_id} not found")

        url = await remote_client.get_download_url(remote_id)
        if url is None:
            raise DocumentNotFoundError(f"File {file_id} not found on remote drive")
        return url
