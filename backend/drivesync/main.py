import os
import sys

from .core import config
from .core.logging_config import get_logger, setup_logging
from .gateway import APIGateway
from .routers import dependencies, documents, drop_queue, files, me

# Initialize logging
setup_logging()
logger = get_logger(__name__)

gateway = APIGateway()

# Setup middleware (CORS, rate limiting, logging, error handling)
gateway.setup_middleware()

gateway.register_router(documents.router, tags=["Documents"])
gateway.register_router(files.router, tags=["Files"])
gateway.register_router(drop_queue.router, tags=["Drop queue"])
gateway.register_router(me.router, tags=["Session"])

gateway.register_health_endpoints()

app = gateway.get_app()


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("=" * 60)
    logger.info("Starting Drive Sync Backend...")
    logger.info("=" * 60)

    try:
        import fastapi
        import uvicorn
        logger.info("Framework & Server:")
        logger.info(f"  → FastAPI Version: {fastapi.__version__}")
        logger.info(f"  → Uvicorn Version: {uvicorn.__version__}")
        logger.info(f"  → Python Version: {sys.version.split()[0]}")
    except ImportError as e:
        logger.debug(f"Could not get framework versions: {e}")

    logger.info(f"  → Environment: {os.getenv('ENVIRONMENT', 'development')}")
    logger.info(f"  → Routers: {', '.join(gateway.routers)}")

    logger.info("Rate Limiting:")
    logger.info(f"  → Enabled: {config.RATE_LIMIT_ENABLED}")
    if config.RATE_LIMIT_ENABLED:
        logger.info(f"  → Limit: {config.RATE_LIMIT_PER_MINUTE} requests/minute")

    logger.info("Remote Storage:")
    logger.info(f"  → Backend: {config.STORAGE_TYPE.upper()}")
    logger.info(f"  → Conflict Behavior: {config.REMOTE_CONFLICT_BEHAVIOR}")
    if config.STORAGE_TYPE.lower() == "s3":
        if config.S3_BUCKET_NAME:
            logger.info(f"    → S3 Bucket: {config.S3_BUCKET_NAME}")
        else:
            logger.warning("    → S3 Bucket: Not configured")
    elif config.STORAGE_TYPE.lower() == "graph":
        if config.MS_DRIVE_ID:
            logger.info(f"    → Drive ID: {config.MS_DRIVE_ID}")
        else:
            logger.warning("    → Drive ID: Not configured")

    await dependencies.initialize_database()
    await dependencies.initialize_services()

    if dependencies.file_drop_handler is not None:
        dependencies.file_drop_handler.start()
        logger.info(f"  → Drop directory sync interval: {config.FILE_DROP_SYNC_INTERVAL_MS}ms")

    logger.info("=" * 60)
    logger.info("✅ Drive Sync Backend initialized successfully")
    logger.info("=" * 60)


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down Drive Sync Backend...")

    if dependencies.file_drop_handler is not None:
        await dependencies.file_drop_handler.stop()
        logger.debug("File drop handler stopped")

    if dependencies.db_service is not None:
        await dependencies.db_service.close()
        logger.debug("Metadata store closed")

    logger.info("Drive Sync Backend shutdown complete")
