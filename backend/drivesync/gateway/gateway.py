"""
API Gateway

Main gateway class that sets up the application, its middleware and its routers.
"""
import os
from typing import List, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from ..api.exceptions import DriveSyncError
from ..core import config
from ..core.logging_config import get_logger
from .middleware import (
    ErrorHandlingMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    business_exception_handler
)

logger = get_logger(__name__)


class APIGateway:
    """
    API Gateway that manages routing and middleware.

    Responsibilities:
    - Initialize FastAPI application
    - Register middleware (CORS, rate limiting, logging, error handling)
    - Register routers
    - Provide the health check endpoint
    """

    def __init__(
        self,
        title: str = "Drive Sync API",
        description: str = "Uploads business documents to their location on a remote drive",
        version: str = "1.0.0",
        enable_docs: Optional[bool] = None
    ):
        self.title = title
        self.description = description
        self.version = version
        self.enable_docs = enable_docs if enable_docs is not None else (
            os.getenv("ENVIRONMENT") != "production"
        )

        self.app = FastAPI(
            title=self.title,
            description=self.description,
            version=self.version,
            docs_url="/docs" if self.enable_docs else None,
            redoc_url="/redoc" if self.enable_docs else None
        )
        self.routers: List[str] = []

        self.limiter = Limiter(
            key_func=get_remote_address,
            default_limits=[f"{config.RATE_LIMIT_PER_MINUTE}/minute"],
            enabled=config.RATE_LIMIT_ENABLED
        )
        self.app.state.limiter = self.limiter
        self.app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
        self.app.add_exception_handler(DriveSyncError, business_exception_handler)

        logger.info("API Gateway initialized")

    def setup_middleware(self):
        """Configure all middleware."""
        logger.info("Setting up middleware...")

        # Error handling (must be first to catch all errors)
        self.app.add_middleware(ErrorHandlingMiddleware)
        logger.debug("  → Error handling middleware added")

        self.app.add_middleware(SlowAPIMiddleware)
        logger.debug("  → Rate limit middleware added")

        self.app.add_middleware(RequestLoggingMiddleware, skip_paths=["/health", "/docs", "/redoc", "/openapi.json"])
        logger.debug("  → Request logging middleware added")

        # Request ID runs before logging so the ID shows in the log lines
        self.app.add_middleware(RequestIDMiddleware)
        logger.debug("  → Request ID middleware added")

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["Location", "X-Request-ID"],
        )
        logger.debug(f"  → CORS middleware added (origins: {', '.join(config.CORS_ORIGINS)})")

        logger.info("✅ All middleware configured")

    def register_router(self, router: APIRouter, prefix: str = "", tags: Optional[List[str]] = None):
        """
        Register a router with the gateway.

        Args:
            router: FastAPI router instance
            prefix: URL prefix for the router
            tags: OpenAPI tags for documentation
        """
        self.app.include_router(router, prefix=prefix, tags=tags or [])
        self.routers.append(", ".join(tags or []) or prefix or "/")
        logger.info(f"Registered router {tags or ''} at prefix '{prefix}'")

    def register_health_endpoints(self):
        """Register health check endpoints."""

        @self.app.get("/health")
        async def health_check():
            """
            Health check endpoint for container orchestration.

            Returns 200 if healthy, 503 if unhealthy.
            """
            from ..routers import dependencies

            if dependencies.db_service is None:
                logger.warning("Health check failed: Metadata store not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"status": "unhealthy", "reason": "Metadata store not initialized"}
                )
            if dependencies.orchestrator is None or dependencies.file_service is None:
                logger.warning("Health check failed: Services not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"status": "unhealthy", "reason": "Services not initialized"}
                )

            handler = dependencies.file_drop_handler
            return {
                "status": "healthy",
                "database": "connected",
                "services": "initialized",
                "file_drop": "running" if handler is not None and handler.is_running else "disabled"
            }

        logger.info("Health check endpoints registered")

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self.app
