"""
Remote Storage Factory for creating storage adapters.
Implements Factory Pattern for plug-and-play storage support.
"""
from pathlib import Path
from typing import Optional

from .base import RemoteStorageInterface
from .graph_storage import GraphRemoteStorage
from .local_storage import LocalRemoteStorage
from .s3_storage import S3RemoteStorage
from ...core import config
from ...core.logging_config import get_logger
from ...domain import SessionHandle

logger = get_logger(__name__)


class RemoteStorageFactory:
    """
    Factory for creating remote storage adapters.
    Supports multiple storage backends: Local, S3, MS Graph.

    Adapters act on behalf of a user session; only the Graph adapter actually
    needs the session's access token.
    """

    def __init__(self, storage_type: Optional[str] = None, **kwargs):
        self.storage_type = (storage_type or config.STORAGE_TYPE).lower()
        self.options = kwargs

    def for_session(self, session: Optional[SessionHandle] = None) -> RemoteStorageInterface:
        """Create an adapter acting on behalf of the given session."""
        return RemoteStorageFactory.create(self.storage_type, session=session, **self.options)

    @staticmethod
    def create(
        storage_type: Optional[str] = None,
        session: Optional[SessionHandle] = None,
        **kwargs
    ) -> RemoteStorageInterface:
        """
        Create a storage adapter instance.

        Args:
            storage_type: Type of storage ('local', 's3', 'graph', or None for configuration)
            session: User session the adapter acts for (required for 'graph')
            **kwargs: Additional arguments for specific storage adapters

        Returns:
            RemoteStorageInterface instance

        Examples:
            # Local filesystem
            storage = RemoteStorageFactory.create('local', base_dir=Path('drive'))

            # S3
            storage = RemoteStorageFactory.create('s3', bucket_name='my-bucket')

            # O365 drive through MS Graph
            storage = RemoteStorageFactory.create('graph', session=session)
        """
        storage_type = (storage_type or config.STORAGE_TYPE).lower()
        kwargs.setdefault("conflict_behavior", config.REMOTE_CONFLICT_BEHAVIOR)

        if storage_type == "local":
            return RemoteStorageFactory._create_local(**kwargs)
        elif storage_type == "s3":
            return RemoteStorageFactory._create_s3(**kwargs)
        elif storage_type == "graph":
            return RemoteStorageFactory._create_graph(session, **kwargs)
        else:
            raise ValueError(
                f"Unsupported storage type: {storage_type}. "
                f"Supported types: 'local', 's3', 'graph'"
            )

    @staticmethod
    def _create_local(**kwargs) -> LocalRemoteStorage:
        """Create local filesystem storage adapter."""
        base_dir = kwargs.get("base_dir", config.LOCAL_STORAGE_DIR)
        if isinstance(base_dir, str):
            base_dir = Path(base_dir)
        return LocalRemoteStorage(base_dir=base_dir, conflict_behavior=kwargs["conflict_behavior"])

    @staticmethod
    def _create_s3(**kwargs) -> S3RemoteStorage:
        """Create S3 storage adapter."""
        bucket_name = kwargs.get("bucket_name", config.S3_BUCKET_NAME)
        if not bucket_name:
            raise ValueError("S3 bucket_name is required")

        return S3RemoteStorage(
            bucket_name=bucket_name,
            aws_access_key_id=kwargs.get("aws_access_key_id", config.AWS_ACCESS_KEY_ID),
            aws_secret_access_key=kwargs.get("aws_secret_access_key", config.AWS_SECRET_ACCESS_KEY),
            region_name=kwargs.get("region_name", config.AWS_REGION),
            endpoint_url=kwargs.get("endpoint_url", config.S3_ENDPOINT_URL),
            conflict_behavior=kwargs["conflict_behavior"]
        )

    @staticmethod
    def _create_graph(session: Optional[SessionHandle], **kwargs) -> GraphRemoteStorage:
        """Create MS Graph storage adapter for a user session."""
        if session is None:
            raise ValueError("MS Graph storage requires an authenticated session")

        return GraphRemoteStorage(
            drive_id=kwargs.get("drive_id", config.MS_DRIVE_ID),
            access_token=session.access_token,
            api_url=kwargs.get("api_url", config.GRAPH_API_URL),
            conflict_behavior=kwargs["conflict_behavior"],
            timeout=kwargs.get("timeout", config.GRAPH_REQUEST_TIMEOUT)
        )
