"""
Remote storage abstraction layer for plug-and-play storage support.
Supports multiple storage backends without changing business logic.
"""
from .base import RemoteStorageInterface
from .local_storage import LocalRemoteStorage
from .s3_storage import S3RemoteStorage
from .graph_storage import GraphRemoteStorage
from .factory import RemoteStorageFactory

__all__ = [
    "RemoteStorageInterface",
    "LocalRemoteStorage",
    "S3RemoteStorage",
    "GraphRemoteStorage",
    "RemoteStorageFactory"
]
