"""
Storage Backend Abstraction

Key/value slots holding raw strings. The holding store owns serialization;
backends only move text in and out.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Abstract base class for key/value storage"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            Stored string, or None if nothing is stored
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Replace the value stored under key"""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key; no-op if absent"""
        pass


class InMemoryStorage(StorageBackend):
    """Process-local storage, used by tests"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage(StorageBackend):
    """Stores each key as <data_dir>/<key>.json"""

    def __init__(self, data_dir: str):
        """
        Initialize file storage.

        Args:
            data_dir: Directory holding one file per key (created on first write)
        """
        self.data_dir = Path(data_dir)
        logger.debug(f"Initialized JsonFileStorage at {self.data_dir}")

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, 'r') as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write a sibling file and swap it in so a failed write leaves the old array intact
        tmp_path = path.with_name(f"{path.name}.tmp")
        try:
            with open(tmp_path, 'w') as f:
                f.write(value)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
