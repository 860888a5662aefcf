"""
Session provider - finds the user session uploads are made on behalf of.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Optional

from .database import MetadataStoreInterface
from ..core.logging_config import get_logger
from ..domain import LocalFileUri, SessionHandle

logger = get_logger(__name__)


class SessionProviderInterface(ABC):
    """Interface for session and access token lookups."""

    @abstractmethod
    async def get_active_session_for_creator(self, local_file_uri: LocalFileUri) -> Optional[SessionHandle]:
        """Get a session with an unexpired access token for the creator of a dropped file."""
        pass

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[SessionHandle]:
        """Get a session with an unexpired access token by its ID."""
        pass

    async def get_access_token(self, session_id: str) -> Optional[str]:
        """Get the unexpired access token of a session."""
        session = await self.get_session(session_id)
        return session.access_token if session else None


class DatabaseSessionProvider(SessionProviderInterface):
    """Session provider reading users' OAuth sessions from the metadata store."""

    def __init__(self, db_service: MetadataStoreInterface, clock: Optional[Callable[[], datetime]] = None):
        self.db_service = db_service
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def get_active_session_for_creator(self, local_file_uri: LocalFileUri) -> Optional[SessionHandle]:
        creator = await self.db_service.get_file_creator(local_file_uri)
        if creator is None:
            logger.info(f"No creator known for file {local_file_uri}")
            return None

        now = self.clock()
        for session in await self.db_service.get_sessions_for_user(creator):
            if session.is_active(now):
                return session
        logger.info(f"No active session found for user {creator}")
        return None

    async def get_session(self, session_id: str) -> Optional[SessionHandle]:
        session = await self.db_service.get_session(session_id)
        if session is None or not session.is_active(self.clock()):
            return None
        return session
