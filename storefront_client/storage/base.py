"""Key-value storage capability used for persisted client state"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """String key to string value store (get/set/remove)"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key; no-op when absent"""

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
