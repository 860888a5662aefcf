"""
Shared dependencies for routers.
Provides metadata store and service initialization.

This module manages service lifecycle and dependency injection.
"""
from typing import AsyncIterator, Optional

from fastapi import Depends, Header

from ..api.exceptions import MissingSessionError, NoActiveSession
from ..core import config
from ..core.logging_config import get_logger
from ..domain import SessionHandle
from ..services.database import DatabaseFactory, MetadataStoreInterface
from ..services.drop_uploader import DroppedFileUploader
from ..services.file_drop_handler import FileDropHandler
from ..services.file_service import FileService
from ..services.location_resolver import LocationResolver
from ..services.sessions import DatabaseSessionProvider
from ..services.storage import RemoteStorageFactory, RemoteStorageInterface
from ..services.upload_orchestrator import UploadOrchestrator

logger = get_logger(__name__)

SESSION_HEADER = "mu-session-id"

# Global services (will be initialized on startup)
db_service: Optional[MetadataStoreInterface] = None
session_provider: Optional[DatabaseSessionProvider] = None
storage_factory: Optional[RemoteStorageFactory] = None
orchestrator: Optional[UploadOrchestrator] = None
file_service: Optional[FileService] = None
file_drop_handler: Optional[FileDropHandler] = None


async def initialize_database(database_type: Optional[str] = None, **kwargs):
    """Initialize metadata store adapter based on configuration."""
    global db_service

    database_type = database_type or config.DATABASE_TYPE
    logger.info(f"Initializing metadata store: {database_type}")
    db_service = await DatabaseFactory.create_and_initialize(database_type, **kwargs)
    logger.info("  ✅ Metadata store initialized")


async def initialize_services(storage_factory_override: Optional[RemoteStorageFactory] = None):
    """
    Initialize all services after the metadata store is ready.

    Sets up the location resolver, upload orchestrator, file service,
    session provider and the drop directory handler.
    """
    global session_provider, storage_factory, orchestrator, file_service, file_drop_handler

    if db_service is None:
        await initialize_database()

    logger.info("Initializing services...")
    storage_factory = storage_factory_override or RemoteStorageFactory()
    logger.info(f"    → Storage Type: {storage_factory.storage_type}")
    session_provider = DatabaseSessionProvider(db_service)
    orchestrator = UploadOrchestrator(LocationResolver(db_service))
    file_service = FileService(db_service)

    if config.FILE_DROP_ENABLED:
        uploader = DroppedFileUploader(db_service, session_provider, storage_factory, orchestrator)
        file_drop_handler = FileDropHandler(
            config.FILE_DROP_DIRECTORY,
            uploader,
            failed_directory=config.FAILED_DROP_DIRECTORY,
            interval_seconds=config.FILE_DROP_SYNC_INTERVAL_MS / 1000
        )
        logger.info(f"    → Drop directory: {config.FILE_DROP_DIRECTORY}")
    else:
        file_drop_handler = None
        logger.info("    → Drop directory synchronization disabled")

    logger.info("✅ All services initialized successfully")


def get_db_service() -> MetadataStoreInterface:
    """Get metadata store (dependency injection)."""
    if db_service is None:
        raise RuntimeError("Metadata store not initialized")
    return db_service


def get_orchestrator() -> UploadOrchestrator:
    """Get upload orchestrator (dependency injection)."""
    if orchestrator is None:
        raise RuntimeError("Upload orchestrator not initialized")
    return orchestrator


def get_file_service() -> FileService:
    """Get file service (dependency injection)."""
    if file_service is None:
        raise RuntimeError("File service not initialized")
    return file_service


def get_file_drop_handler() -> Optional[FileDropHandler]:
    """Get drop directory handler; None when synchronization is disabled."""
    return file_drop_handler


async def get_session(mu_session_id: Optional[str] = Header(None, alias=SESSION_HEADER)) -> SessionHandle:
    """Resolve the session of the current request."""
    if not mu_session_id:
        raise MissingSessionError("Session header is missing")
    if session_provider is None:
        raise RuntimeError("Session provider not initialized")
    session = await session_provider.get_session(mu_session_id)
    if session is None:
        raise NoActiveSession("No access token available for session")
    return session


async def get_remote_client(session: SessionHandle = Depends(get_session)) -> AsyncIterator[RemoteStorageInterface]:
    """Get a remote storage client acting for the session of the current request."""
    if storage_factory is None:
        raise RuntimeError("Storage factory not initialized")
    client = storage_factory.for_session(session)
    try:
        yield client
    finally:
        await client.close()
