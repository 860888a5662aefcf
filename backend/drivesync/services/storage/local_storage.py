"""
Local filesystem storage adapter implementing RemoteStorageInterface.
Mirrors the remote drive in a local directory - perfect for development and demos.
"""
import asyncio
import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .base import RemoteStorageInterface, renamed_candidates
from ...api.exceptions import RemoteAccessFailed, RemoteDeleteFailed, RemoteUploadFailed
from ...core.logging_config import get_logger
from ...domain import LocationSpec, RemoteId, UploadedFileRecord

logger = get_logger(__name__)


class LocalRemoteStorage(RemoteStorageInterface):
    """
    Local filesystem storage adapter.
    The remote identity of a file is its path relative to the base directory.
    """

    def __init__(self, base_dir: Optional[Path] = None, conflict_behavior: str = "rename"):
        """
        Initialize local remote storage.

        Args:
            base_dir: Base directory standing in for the drive root (defaults to backend/drive)
            conflict_behavior: 'rename', 'replace' or 'fail' when the target name exists
        """
        super().__init__(conflict_behavior)
        if base_dir is None:
            from ...core.config import BASE_DIR
            base_dir = BASE_DIR / "drive"

        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    async def initialize(self):
        """Initialize storage - ensure base directory exists."""
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, file_path: str) -> Path:
        """Get full filesystem path from a drive path."""
        # Normalize path to prevent directory traversal
        normalized = Path(file_path).as_posix().lstrip('/')
        full_path = (self.base_dir / normalized).resolve()
        if self.base_dir.resolve() not in full_path.parents and full_path != self.base_dir.resolve():
            raise ValueError(f"Path escapes storage root: {file_path}")
        return full_path

    def _target_path(self, directory: Path, name: str) -> Path:
        if self.conflict_behavior == "replace":
            return directory / name
        if self.conflict_behavior == "fail":
            target = directory / name
            if target.exists():
                raise FileExistsError(f"File already exists: {target}")
            return target
        for candidate in renamed_candidates(name):
            target = directory / candidate
            if not target.exists():
                return target

    def _record(self, full_path: Path) -> UploadedFileRecord:
        stat = full_path.stat()
        modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        mime_type, _ = mimetypes.guess_type(full_path.name)
        return UploadedFileRecord(
            remote_id=RemoteId(full_path.relative_to(self.base_dir.resolve()).as_posix()),
            name=full_path.name,
            url=full_path.as_uri(),
            size=stat.st_size,
            mime_type=mime_type or "application/octet-stream",
            created_at=modified,
            modified_at=modified,
        )

    async def upload_file(self, path: str, name: str, content: bytes, size: int) -> UploadedFileRecord:
        """Write content into the local drive mirror."""
        def _save():
            directory = self._get_full_path(path)
            directory.mkdir(parents=True, exist_ok=True)
            target = self._target_path(directory, name)
            target.write_bytes(content)
            return self._record(target)

        logger.info(f"Starting upload of file to local drive on path {path}/{name}")
        loop = asyncio.get_running_loop()
        try:
            record = await loop.run_in_executor(None, _save)
        except (OSError, ValueError) as e:
            logger.error(f"Uploading file to local drive on path {path}/{name} failed: {e}")
            raise RemoteUploadFailed(f"Upload of {path}/{name} failed: {e}") from e
        logger.info(f"Uploading file to local drive on path {path}/{name} succeeded. Item id: {record.remote_id}")
        return record

    async def delete_file(self, remote_id: RemoteId) -> None:
        """Delete a file from the local drive mirror."""
        def _delete():
            self._get_full_path(remote_id).unlink()

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _delete)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to delete file with id {remote_id} from local drive: {e}")
            raise RemoteDeleteFailed(f"Delete of {remote_id} failed: {e}") from e
        logger.info(f"Deleting file with id {remote_id} from local drive succeeded.")

    async def get_download_url(self, remote_id: RemoteId) -> Optional[str]:
        full_path = self._get_full_path(remote_id)
        if not full_path.is_file():
            logger.info(f"File with id {remote_id} not found on local drive. Unable to download.")
            return None
        return full_path.as_uri()

    async def find_file_by_location(self, location: LocationSpec) -> Optional[RemoteId]:
        full_path = self._get_full_path(location.full_path)
        if not full_path.is_file():
            logger.info(f"File at path {location.full_path} not found on local drive.")
            return None
        return RemoteId(full_path.relative_to(self.base_dir.resolve()).as_posix())

    async def me(self) -> None:
        if not self.base_dir.is_dir():
            raise RemoteAccessFailed(f"Local drive {self.base_dir} is not available")
        logger.info(f"Local drive {self.base_dir} is available")
