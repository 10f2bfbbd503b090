"""
Chat session sources

A source loads and saves the full session list of one user. The store reads
through an ordered list of sources (remote first, then local) and writes to
all of them.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, TYPE_CHECKING

from pydantic import BaseModel, Field

from ..exceptions import HerecoError
from ..storage import KeyValueStorage
from ..types.chat import ChatMessage, ChatSession

if TYPE_CHECKING:
    from ..async_client import AsyncClient

logger = logging.getLogger(__name__)

SESSIONS_KEY_PREFIX = "chatbot-chats-"
LEGACY_HISTORY_KEY = "chatbot_history"
LEGACY_KEYS = ("chatbot_history", "chatbot-history")
LEGACY_MAX_AGE = timedelta(hours=24)


class SessionSource(ABC):
    """Abstract base class for chat session persistence"""

    name: str = "source"

    @abstractmethod
    async def load(self, user_id: str) -> List[ChatSession]:
        """
        Load every saved session of a user

        Args:
            user_id: Session owner

        Returns:
            Sessions, most recently saved first
        """
        pass

    @abstractmethod
    async def save(self, user_id: str, sessions: Sequence[ChatSession]) -> None:
        """Replace the saved session list of a user"""
        pass


class LocalSessionSource(SessionSource):
    """Sessions kept in local storage under ``chatbot-chats-<userId>``"""

    name = "local"

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    @staticmethod
    def key(user_id: str) -> str:
        return f"{SESSIONS_KEY_PREFIX}{user_id}"

    async def load(self, user_id: str) -> List[ChatSession]:
        raw = self.storage.get_json(self.key(user_id), [])
        if not isinstance(raw, list):
            logger.warning(f"Ignoring malformed session list for user {user_id}")
            return []

        sessions = []
        for item in raw:
            try:
                sessions.append(ChatSession.model_validate(item))
            except ValueError as e:
                logger.warning(f"Skipping unreadable chat session: {e}")
        return sessions

    async def save(self, user_id: str, sessions: Sequence[ChatSession]) -> None:
        self.storage.set_json(self.key(user_id), [session.to_storage() for session in sessions])


class RemoteSessionSource(SessionSource):
    """Sessions stored by the backend at /api/chatbot/chats"""

    name = "remote"

    def __init__(self, client: "AsyncClient"):
        self.client = client

    async def load(self, user_id: str) -> List[ChatSession]:
        history = await self.client.chatbot.get_chats()
        return list(history.chats)

    async def save(self, user_id: str, sessions: Sequence[ChatSession]) -> None:
        await self.client.chatbot.save_chats(user_id, sessions)


async def load_with_fallback(sources: Sequence[SessionSource], user_id: str) -> List[ChatSession]:
    """
    Read sessions from the first source that has any

    Sources are tried in order. A failing source is logged and skipped; an
    empty result moves on to the next source. Results are never merged.

    Args:
        sources: Sources in priority order
        user_id: Session owner

    Returns:
        The first non-empty session list, or an empty list
    """
    for source in sources:
        try:
            sessions = await source.load(user_id)
        except (HerecoError, ValueError) as e:
            logger.warning(f"Failed to load chat sessions from {source.name} source: {e}")
            continue
        if sessions:
            logger.debug(f"Loaded {len(sessions)} chat sessions from {source.name} source")
            return sessions
    return []


class LegacyHistory(BaseModel):
    """The single-chat history older pages kept under ``chatbot_history``"""

    messages: List[ChatMessage] = Field(default_factory=list)
    timestamp: datetime


def read_legacy_history(storage: KeyValueStorage, now: Optional[datetime] = None) -> Optional[LegacyHistory]:
    """
    Legacy history worth migrating: non-empty and younger than 24 hours

    Returns:
        The parsed history, or None when absent, stale or unreadable
    """
    raw = storage.get_json(LEGACY_HISTORY_KEY)
    if not isinstance(raw, dict):
        return None
    try:
        history = LegacyHistory.model_validate(raw)
    except ValueError as e:
        logger.warning(f"Discarding unreadable legacy chat history: {e}")
        return None

    now = now or datetime.now(timezone.utc)
    timestamp = history.timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    if not history.messages or now - timestamp >= LEGACY_MAX_AGE:
        return None
    return history


def remove_legacy_history(storage: KeyValueStorage) -> None:
    for key in LEGACY_KEYS:
        storage.remove_item(key)
