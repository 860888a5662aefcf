"""
Abstract base class for remote storage adapters.
All remote storage implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import Optional

from ...domain import LocationSpec, RemoteId, UploadedFileRecord

CONFLICT_BEHAVIORS = ("rename", "replace", "fail")


class RemoteStorageInterface(ABC):
    """
    Abstract interface for the remote drive files are synchronized to.
    This allows plug-and-play storage support (local, S3, MS Graph) without changing business logic.

    Lookups signal "not found" by returning None; only backend errors raise.
    """

    def __init__(self, conflict_behavior: str = "rename"):
        if conflict_behavior not in CONFLICT_BEHAVIORS:
            raise ValueError(
                f"Unsupported conflict behavior: {conflict_behavior}. "
                f"Supported behaviors: {', '.join(CONFLICT_BEHAVIORS)}"
            )
        self.conflict_behavior = conflict_behavior

    @abstractmethod
    async def upload_file(self, path: str, name: str, content: bytes, size: int) -> UploadedFileRecord:
        """
        Upload content as a file named `name` in directory `path`.

        When a file with the same name exists, the configured conflict behavior
        applies (rename by default, so the stored name may differ from `name`).

        Raises:
            RemoteUploadFailed: on any backend error
        """
        pass

    @abstractmethod
    async def delete_file(self, remote_id: RemoteId) -> None:
        """
        Delete the file with the given remote identity.

        Raises:
            RemoteDeleteFailed: on any backend error
        """
        pass

    @abstractmethod
    async def get_download_url(self, remote_id: RemoteId) -> Optional[str]:
        """Get a URL to download the file, or None if it does not exist."""
        pass

    @abstractmethod
    async def find_file_by_location(self, location: LocationSpec) -> Optional[RemoteId]:
        """Get the remote identity of the file at a location, or None if absent."""
        pass

    @abstractmethod
    async def me(self) -> None:
        """
        Check that the drive is reachable for the user this client acts for.

        Raises:
            RemoteAccessFailed: when the backend rejects or cannot serve the request
        """
        pass

    async def initialize(self):
        """Initialize storage (create directories, verify connections, etc.)."""
        pass

    async def close(self):
        """Close storage connection (cleanup, close clients, etc.)."""
        pass


def renamed_candidates(name: str):
    """Yield `name`, then `stem 1.ext`, `stem 2.ext`, ... as a drive does when renaming on conflict."""
    yield name
    stem, dot, suffix = name.rpartition(".")
    if not dot or not stem:
        stem, dot, suffix = name, "", ""
    counter = 1
    while True:
        yield f"{stem} {counter}{dot}{suffix}"
        counter += 1
