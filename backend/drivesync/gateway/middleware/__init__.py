"""
Gateway Middleware Module

Custom middleware for request/response handling, logging, and error handling.
"""
from .error_handler import ErrorHandlingMiddleware, business_exception_handler
from .request_logging import RequestIDMiddleware, RequestLoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "business_exception_handler"
]
