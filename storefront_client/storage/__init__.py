"""Persisted key-value storage backends"""

from typing import Optional

from .base import KeyValueStorage
from .memory import MemoryStorage
from .file_store import FileStorage
from .redis_store import RedisStorage
from ..config import StorageConfig


def create_storage(storage_config: Optional[StorageConfig] = None) -> KeyValueStorage:
    """Build the storage backend selected by configuration"""
    storage_config = storage_config or StorageConfig(store_type="memory")
    if storage_config.store_type == "redis":
        return RedisStorage(
            host=storage_config.redis_host,
            port=storage_config.redis_port,
            db=storage_config.redis_db,
            key_prefix=storage_config.key_prefix
        )
    if storage_config.store_type == "file":
        return FileStorage(storage_config.store_path)
    return MemoryStorage()


__all__ = [
    'KeyValueStorage',
    'MemoryStorage',
    'FileStorage',
    'RedisStorage',
    'create_storage'
]
