"""JSON file storage so client state survives process restarts"""

import json
import os
import tempfile
import threading
from typing import Dict, Optional

from .base import KeyValueStorage
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FileStorage(KeyValueStorage):
    """Keeps all keys in one JSON object on disk"""

    def __init__(self, path: str):
        """
        Initialize file storage

        Args:
            path: Location of the JSON state file (created on first write)
        """
        self.path = path
        self._lock = threading.Lock()
        logger.info(f"FileStorage initialized at: {self.path}")

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read state file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed state file {self.path}")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        # Write to a temp file and swap it in so readers never see half a file
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
