"""
API Gateway Module

Single entry point for all API requests: routing, middleware and error handling.
"""
from .gateway import APIGateway

__all__ = ["APIGateway"]
