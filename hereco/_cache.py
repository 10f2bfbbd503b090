"""In-memory response cache for GET endpoints"""

import json
import logging
import time
from collections import OrderedDict
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    TTL cache bounded by entry count

    Keys are built from the endpoint name and its query options. When the
    cache is full the oldest entry is evicted.
    """

    def __init__(self, ttl_seconds: float = 300.0, max_size: int = 50, enabled: bool = True):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self.enabled = enabled
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()

    @staticmethod
    def make_key(name: str, options: Optional[Dict[str, Any]] = None) -> str:
        if not options:
            return name
        return f"{name}:{json.dumps(options, sort_keys=True, default=str)}"

    def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if time.monotonic() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        logger.debug(f"Response cache HIT for {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        if not self.enabled or self.max_size <= 0:
            return
        self._entries[key] = (time.monotonic(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def clear(self, key: Optional[str] = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
