"""
Key/value local storage backends

A browser exposes ``localStorage``: a per-origin string-to-string store that
survives page reloads. The chat session store and the environment resolver
only need that contract, so it is modelled as an abstract backend with an
in-memory implementation (tests, ephemeral sessions) and a file-backed one.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Abstract base class for local storage backends"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read a stored value

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one

        Args:
            key: Storage key
            value: String value
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a key; missing keys are ignored"""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys"""
        pass

    def get_json(self, key: str, default: Any = None) -> Any:
        """
        Read and decode a JSON value

        Corrupt entries are logged and treated as missing.
        """
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Failed to parse stored value for '{key}': {e}")
            return default

    def set_json(self, key: str, value: Any) -> None:
        """Encode a value as JSON and store it"""
        self.set_item(key, json.dumps(value))


class MemoryStorage(KeyValueStorage):
    """Process-local storage, discarded when the object is garbage collected"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class FileStorage(KeyValueStorage):
    """Storage persisted to a single JSON file"""

    def __init__(self, path: str = "./.hereco/local_storage.json"):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read local storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, items: Dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(items, f)
        tmp_path.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def keys(self) -> List[str]:
        return list(self._read())
