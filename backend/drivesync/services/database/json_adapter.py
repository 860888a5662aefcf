"""
JSON file-based adapter implementing MetadataStoreInterface.
Perfect for local demos - stores every collection in its own JSON file.
Data persists between restarts, no database setup needed.
"""
import asyncio
import copy
import json
from pathlib import Path
from threading import Lock
from typing import Optional

from .memory_adapter import COLLECTIONS, MemoryAdapter
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class JSONAdapter(MemoryAdapter):
    """
    JSON file-based metadata store.
    Keeps collections in memory and writes a collection back to disk after each change.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize JSON adapter.

        Args:
            data_dir: Directory to store JSON files (defaults to backend/data/json_db)
        """
        super().__init__()
        if data_dir is None:
            from ...core.config import BASE_DIR
            data_dir = BASE_DIR / "data" / "json_db"

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        # Lock for thread-safe file operations
        self._lock = Lock()

    def _collection_file(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    async def initialize(self):
        """Initialize database - load data from JSON files."""
        self._load_data()

    async def close(self):
        """Close database - save all collections to JSON files."""
        for collection in COLLECTIONS:
            await self._changed(collection)

    def _load_data(self):
        """Load data from JSON files into memory."""
        for collection in COLLECTIONS:
            path = self._collection_file(collection)
            if not path.exists():
                self._data[collection] = {}
                continue
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    self._data[collection] = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Could not load {path.name}: {e}")
                self._data[collection] = {}
        self._rebuild_indexes()
        logger.debug(f"Loaded metadata store from {self.data_dir}")

    async def _changed(self, collection: str):
        """Save one collection from memory to its JSON file."""
        snapshot = copy.deepcopy(self._data[collection])
        path = self._collection_file(collection)

        def _save():
            with self._lock:
                tmp_path = path.with_suffix(".json.tmp")
                with open(tmp_path, 'w', encoding='utf-8') as f:
                    json.dump(snapshot, f, indent=2, ensure_ascii=False)
                tmp_path.replace(path)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _save)
