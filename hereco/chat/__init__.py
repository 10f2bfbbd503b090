"""Chat sessions: the session store and its persistence sources"""

from .sources import (
    SessionSource,
    LocalSessionSource,
    RemoteSessionSource,
    load_with_fallback,
)
from .store import ChatSessionStore

__all__ = [
    "SessionSource",
    "LocalSessionSource",
    "RemoteSessionSource",
    "load_with_fallback",
    "ChatSessionStore",
]
