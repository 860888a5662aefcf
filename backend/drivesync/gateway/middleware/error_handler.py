"""
Error Handling

Centralized error handling and response formatting.
"""
import os
import traceback

from fastapi import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ...api.exceptions import DriveSyncError, handle_business_exception
from ...core.logging_config import get_logger

logger = get_logger(__name__)


def _error_body(request: Request, status_code: int, detail, **extra) -> dict:
    body = {
        "error": detail,
        "status_code": status_code,
        "path": request.url.path,
        "request_id": getattr(request.state, "request_id", None)
    }
    body.update(extra)
    return body


async def business_exception_handler(request: Request, exc: DriveSyncError) -> JSONResponse:
    """
    Exception handler converting business exceptions to JSON error responses.

    Registered on the app for DriveSyncError so that the status code comes from
    handle_business_exception.
    """
    http_exception = handle_business_exception(exc)
    if http_exception.status_code >= 500:
        logger.error(
            f"Business exception for {request.method} {request.url.path}: {http_exception.detail}",
            exc_info=exc
        )
    else:
        logger.warning(
            f"Business exception for {request.method} {request.url.path}: {http_exception.detail}"
        )
    return JSONResponse(
        status_code=http_exception.status_code,
        content=_error_body(request, http_exception.status_code, http_exception.detail)
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that turns unexpected exceptions into 500 JSON responses.

    The traceback is included in the response outside production.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            is_development = os.getenv("ENVIRONMENT", "development") != "production"
            error_detail = str(e) if is_development else "Internal server error"
            error_traceback = traceback.format_exc() if is_development else None

            logger.error(f"Unexpected error for {request.method} {request.url.path}: {e}", exc_info=True)

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=_error_body(
                    request,
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    error_detail,
                    traceback=error_traceback
                )
            )
