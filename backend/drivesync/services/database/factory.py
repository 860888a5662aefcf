"""
Database Factory for creating metadata store adapters.
Implements Factory Pattern for plug-and-play database support.
"""
from pathlib import Path
from typing import Optional

from .base import MetadataStoreInterface
from .json_adapter import JSONAdapter
from .memory_adapter import MemoryAdapter
from ...core import config


class DatabaseFactory:
    """
    Factory for creating metadata store adapters.
    Supports JSON (file-based) and Memory (in-memory) backends.
    """

    @staticmethod
    def create(database_type: Optional[str] = None, **kwargs) -> MetadataStoreInterface:
        """
        Create a metadata store adapter instance.

        Args:
            database_type: Type of database ('json', 'memory', or None for configuration)
            **kwargs: Additional arguments for specific database adapters

        Returns:
            MetadataStoreInterface instance

        Examples:
            # JSON (file-based, persistent)
            db = DatabaseFactory.create('json', data_dir=Path('data/json_db'))

            # Memory (in-memory, non-persistent)
            db = DatabaseFactory.create('memory')
        """
        database_type = (database_type or config.DATABASE_TYPE).lower()

        if database_type == "json":
            return DatabaseFactory._create_json(**kwargs)
        elif database_type == "memory":
            return MemoryAdapter()
        else:
            raise ValueError(
                f"Unsupported database type: {database_type}. "
                f"Supported types: 'json', 'memory'"
            )

    @staticmethod
    def _create_json(**kwargs) -> JSONAdapter:
        """Create JSON file-based adapter."""
        data_dir = kwargs.get("data_dir", config.JSON_DB_PATH)
        if isinstance(data_dir, str):
            data_dir = Path(data_dir)
        return JSONAdapter(data_dir=data_dir)

    @staticmethod
    async def create_and_initialize(database_type: Optional[str] = None, **kwargs) -> MetadataStoreInterface:
        """
        Create database adapter and initialize it.

        Args:
            database_type: Type of database
            **kwargs: Additional arguments

        Returns:
            Initialized MetadataStoreInterface instance
        """
        db = DatabaseFactory.create(database_type, **kwargs)
        await db.initialize()
        return db
