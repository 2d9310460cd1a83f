import logging
from typing import Optional

import redis

from .base import KeyValueStorage


logger = logging.getLogger(__name__)


class RedisStorage(KeyValueStorage):
    """Persisted client state kept in Redis under a key prefix"""

    def __init__(self, host='localhost', port=6379, db=0, key_prefix="storefront:", client=None):
        self.key_prefix = key_prefix
        if client is not None:
            self.client = client
            return
        try:
            self.client = redis.Redis(host=host, port=port, db=db, decode_responses=True)
            self.client.ping()
            logger.info(f"Connected to Redis for client state. db={db}")
        except redis.exceptions.ConnectionError as e:
            logger.error(f"Could not connect to Redis: {e}. Client state will not be persisted.")
            self.client = None

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        if not self.client:
            return None
        value = self.client.get(self._key(key))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        if not self.client:
            return
        self.client.set(self._key(key), value)

    def remove(self, key: str) -> None:
        if not self.client:
            return
        self.client.delete(self._key(key))
