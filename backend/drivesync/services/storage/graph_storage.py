"""
MS Graph storage adapter implementing RemoteStorageInterface.
Stores files on an O365 drive on behalf of a user.

Requests are authorized with the access token of the user's session. This
adapter only talks to the drive; recording metadata is not its concern.
"""
import asyncio
from datetime import datetime
from typing import Optional
from urllib.parse import quote

import requests

from .base import RemoteStorageInterface
from ...api.exceptions import RemoteAccessFailed, RemoteDeleteFailed, RemoteUploadFailed
from ...core.logging_config import get_logger
from ...domain import LocationSpec, RemoteId, UploadedFileRecord

logger = get_logger(__name__)

# Upload session chunks must be a multiple of 320 KiB
CHUNK_SIZE = 320 * 1024 * 10


def _parse_graph_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GraphRemoteStorage(RemoteStorageInterface):
    """MS Graph drive adapter. The remote identity of a file is its drive item id."""

    def __init__(
        self,
        drive_id: str,
        access_token: str,
        api_url: str = "https://graph.microsoft.com/v1.0",
        conflict_behavior: str = "rename",
        timeout: int = 60,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Graph storage.

        Args:
            drive_id: Id of the O365 drive files are stored on
            access_token: OAuth access token of the user on whose behalf requests are made
            api_url: Base URL of the Graph API
            conflict_behavior: 'rename', 'replace' or 'fail' when the target name exists
            timeout: Timeout in seconds for a single HTTP request
            session: Preconfigured requests session, mainly for tests
        """
        super().__init__(conflict_behavior)
        if not drive_id:
            raise ValueError("MS Graph drive_id is required")
        self.drive_id = drive_id
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.http = session or requests.Session()
        self.http.headers.update({"Authorization": f"Bearer {access_token}"})

    async def close(self):
        self.http.close()

    def _drive_url(self, suffix: str) -> str:
        return f"{self.api_url}/drives/{self.drive_id}{suffix}"

    @staticmethod
    def _is_not_found(response: requests.Response) -> bool:
        if response.status_code != 404:
            return False
        try:
            code = response.json().get("error", {}).get("code")
        except ValueError:
            return True
        return code in (None, "itemNotFound")

    def _upload(self, file_path: str, content: bytes, size: int) -> dict:
        session_url = self._drive_url(f"/root:{quote(file_path)}:/createUploadSession")
        body = {"item": {"@microsoft.graph.conflictBehavior": self.conflict_behavior}}
        response = self.http.post(session_url, json=body, timeout=self.timeout)
        response.raise_for_status()
        upload_url = response.json()["uploadUrl"]

        # The pre-authenticated upload URL must not receive the Authorization header
        result = None
        for start in range(0, size, CHUNK_SIZE):
            chunk = content[start:start + CHUNK_SIZE]
            end = start + len(chunk) - 1
            logger.debug(f"Upload in progress: [{start}-{end}] bytes of content uploaded")
            result = requests.put(
                upload_url,
                data=chunk,
                headers={
                    "Content-Length": str(len(chunk)),
                    "Content-Range": f"bytes {start}-{end}/{size}"
                },
                timeout=self.timeout
            )
            result.raise_for_status()
        if result is None:
            raise RemoteUploadFailed(f"Cannot upload empty file to {file_path}")
        return result.json()

    async def upload_file(self, path: str, name: str, content: bytes, size: int) -> UploadedFileRecord:
        file_path = f"{path.rstrip('/')}/{name}"
        logger.info(f"Starting upload file to drive {self.drive_id} on path {file_path}")
        loop = asyncio.get_running_loop()
        try:
            item = await loop.run_in_executor(None, self._upload, file_path, content, size)
        except requests.RequestException as e:
            logger.error(f"Uploading file to drive {self.drive_id} on path {file_path} failed: {e}")
            raise RemoteUploadFailed(f"Upload of {file_path} failed: {e}") from e
        logger.info(f"Uploading file to drive {self.drive_id} on path {file_path} succeeded. Item id: {item['id']}")
        return UploadedFileRecord(
            remote_id=RemoteId(item["id"]),
            name=item["name"],
            url=item.get("webUrl", ""),
            size=item.get("size", size),
            mime_type=item.get("file", {}).get("mimeType", "application/octet-stream"),
            created_at=_parse_graph_datetime(item["createdDateTime"]),
            modified_at=_parse_graph_datetime(item["lastModifiedDateTime"])
        )

    async def delete_file(self, remote_id: RemoteId) -> None:
        def _delete():
            response = self.http.delete(self._drive_url(f"/items/{remote_id}"), timeout=self.timeout)
            response.raise_for_status()

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _delete)
        except requests.RequestException as e:
            logger.error(f"Failed to delete file with id {remote_id} from drive {self.drive_id}")
            raise RemoteDeleteFailed(f"Delete of {remote_id} failed: {e}") from e
        logger.info(f"Deleting file with id {remote_id} from drive {self.drive_id} succeeded.")

    async def get_download_url(self, remote_id: RemoteId) -> Optional[str]:
        """Get a temporary download URL, or None when the item does not exist."""
        def _get():
            response = self.http.get(
                self._drive_url(f"/items/{remote_id}"),
                params={"select": "id,@microsoft.graph.downloadUrl"},
                timeout=self.timeout
            )
            if self._is_not_found(response):
                return None
            response.raise_for_status()
            return response.json().get("@microsoft.graph.downloadUrl")

        loop = asyncio.get_running_loop()
        url = await loop.run_in_executor(None, _get)
        if url is None:
            logger.info(f"File with id {remote_id} not found on drive {self.drive_id}. Unable to download.")
        return url

    async def find_file_by_location(self, location: LocationSpec) -> Optional[RemoteId]:
        def _find():
            response = self.http.get(
                self._drive_url(f"/root:{quote(location.full_path)}"),
                params={"select": "id,name"},
                timeout=self.timeout
            )
            if self._is_not_found(response):
                return None
            response.raise_for_status()
            return response.json()["id"]

        loop = asyncio.get_running_loop()
        remote_id = await loop.run_in_executor(None, _find)
        if remote_id is None:
            logger.info(f"File at path {location.full_path} not found on drive {self.drive_id}.")
            return None
        return RemoteId(remote_id)

    async def me(self) -> None:
        """Retrieve the profile of the user the access token belongs to."""
        def _get():
            response = self.http.get(f"{self.api_url}/me", timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        loop = asyncio.get_running_loop()
        try:
            profile = await loop.run_in_executor(None, _get)
        except requests.RequestException as e:
            logger.error(f"Failed to retrieve profile from {self.api_url}/me: {e}")
            raise RemoteAccessFailed(f"Profile request failed: {e}") from e
        logger.info(f"Retrieved profile of {profile.get('userPrincipalName', profile.get('id', 'unknown user'))}")
