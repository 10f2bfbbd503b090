"""
Chat Session Store

Owns the current chat conversation and the user's saved sessions. The current
session id is mirrored into the page URL as ``?c=<id>`` so that reloads and
back/forward navigation land on the same conversation.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..exceptions import ChatError, HerecoError
from ..notifications import Notifier, NotificationLevel
from ..page import PageLocation
from ..storage import KeyValueStorage
from ..types.chat import (
    ChatMessage,
    ChatSession,
    MessageRole,
    generate_session_id,
    make_title,
)
from .sources import (
    LocalSessionSource,
    RemoteSessionSource,
    SessionSource,
    load_with_fallback,
    read_legacy_history,
    remove_legacy_history,
)

if TYPE_CHECKING:
    from ..async_client import AsyncClient
    from ..auth import AuthEvent, AuthStateBridge

logger = logging.getLogger(__name__)

SESSION_PARAM = "c"
USER_PARAM = "uid"
MAX_SESSIONS = 50
MAX_MESSAGE_LENGTH = 4000
DEFAULT_MODEL = "gemini-1.5-8b"

ChangeListener = Callable[["ChatSessionStore"], None]


class ChatSessionStore:
    """
    Current chat session plus the saved session list of the signed-in user.

    Saved sessions are read from the remote source first and the local one
    second (see ``load_with_fallback``) and written to local storage, then to
    the backend on a best-effort basis.

    Example:
        >>> store = ChatSessionStore(page, MemoryStorage(), client=client, bridge=bridge)
        >>> await store.send_message("What was episode 12 about?")
        >>> store.current_session_id
        'k3J9...'
    """

    def __init__(
        self,
        page: PageLocation,
        storage: KeyValueStorage,
        client: Optional["AsyncClient"] = None,
        bridge: Optional["AuthStateBridge"] = None,
        notifier: Optional[Notifier] = None,
        remote: Optional[SessionSource] = None,
        model: str = DEFAULT_MODEL,
        max_sessions: int = MAX_SESSIONS,
    ):
        """
        Args:
            page: Page location holding the ``?c=`` parameter
            storage: Local storage for sessions and legacy history
            client: Backend client used for chatbot replies
            bridge: Source of the signed-in user
            notifier: Where user-facing messages go
            remote: Remote session source (defaults to the backend when a client is given)
            model: Chatbot model identifier
            max_sessions: Cap on saved sessions per user
        """
        self.page = page
        self.storage = storage
        self.client = client
        self.bridge = bridge
        self.notifier = notifier or Notifier()
        self.model = model
        self.max_sessions = max_sessions

        if remote is None and client is not None:
            remote = RemoteSessionSource(client)
        self.local = LocalSessionSource(storage)
        self.remote = remote
        self.sources: List[SessionSource] = [s for s in (remote, self.local) if s is not None]

        self._current_id: Optional[str] = None
        self._messages: List[ChatMessage] = []
        self._sessions: List[ChatSession] = []
        self._typing = False
        self._listeners: List[ChangeListener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> Optional[str]:
        """Signed-in user, falling back to the ``?uid=`` page parameter"""
        if self.bridge is not None and self.bridge.current_user is not None:
            return self.bridge.current_user.uid
        return self.page.get_param(USER_PARAM) or None

    @property
    def current_session_id(self) -> Optional[str]:
        return self._current_id

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    @property
    def sessions(self) -> List[ChatSession]:
        """Session list as of the last load or save"""
        return list(self._sessions)

    @property
    def is_typing(self) -> bool:
        return self._typing

    @property
    def title(self) -> str:
        return make_title(self._messages)

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a listener called after every state change

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _reset(self) -> None:
        self._current_id = None
        self._messages = []
        self.page.delete_param(SESSION_PARAM)
        self._changed()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _all_sessions(self, user_id: str) -> List[ChatSession]:
        return await load_with_fallback(self.sources, user_id)

    async def _save_all(self, user_id: str, sessions: List[ChatSession]) -> None:
        await self.local.save(user_id, sessions)
        if self.remote is not None:
            try:
                await self.remote.save(user_id, sessions)
            except (HerecoError, ValueError) as e:
                logger.warning(f"Failed to sync chat sessions to backend: {e}")
        self._sessions = sessions

    async def list_sessions(self) -> List[ChatSession]:
        """
        Saved sessions of the current user, most recent first

        Returns:
            At most ``max_sessions`` sessions; empty when nobody is signed in
        """
        user_id = self.user_id
        if user_id is None:
            self._sessions = []
            return []
        sessions = await self._all_sessions(user_id)
        sessions = [s for s in sessions if s.owner_user_id in ("", user_id)]
        self._sessions = sessions[: self.max_sessions]
        self._changed()
        return list(self._sessions)

    async def persist_current_session(self) -> Optional[ChatSession]:
        """
        Save the current session into the user's session list

        The session replaces its previous copy in place, or goes to the front
        when new. Nothing happens without a session id or a user.

        Returns:
            The saved session, or None when nothing was saved
        """
        user_id = self.user_id
        if self._current_id is None or user_id is None:
            return None

        session = ChatSession(
            id=self._current_id,
            title=make_title(self._messages),
            messages=list(self._messages),
            owner_user_id=user_id,
            updated_at=datetime.now(timezone.utc),
        )

        sessions = await self._all_sessions(user_id)
        for index, existing in enumerate(sessions):
            if existing.id == session.id:
                sessions[index] = session
                break
        else:
            sessions.insert(0, session)

        await self._save_all(user_id, sessions[: self.max_sessions])
        self._changed()
        return session

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def start_new_session(self) -> None:
        """Save the current conversation if it has content, then start empty"""
        if self._current_id is not None and self._messages:
            await self.persist_current_session()
        self._reset()

    async def load_session(self, session_id: str) -> Optional[ChatSession]:
        """
        Make a saved session current

        Unknown ids fall back to a fresh session.

        Returns:
            The loaded session, or None if it was not found
        """
        user_id = self.user_id
        sessions = await self._all_sessions(user_id) if user_id else []
        session = next((s for s in sessions if s.id == session_id), None)
        if session is None:
            logger.warning(f"Chat session {session_id} not found, starting a new one")
            await self.start_new_session()
            return None

        self._current_id = session.id
        self._messages = list(session.messages)
        self.page.set_param(SESSION_PARAM, session.id)
        self._changed()
        return session

    async def delete_session(self, session_id: str) -> bool:
        """
        Remove a session from local and remote storage

        Deleting the current session resets to an empty one without saving
        it again.

        Returns:
            True if the session existed
        """
        user_id = self.user_id
        if user_id is None:
            return False

        sessions = await self._all_sessions(user_id)
        remaining = [s for s in sessions if s.id != session_id]
        found = len(remaining) != len(sessions)
        if found:
            await self._save_all(user_id, remaining)

        if session_id == self._current_id:
            self._reset()
        else:
            self._changed()
        return found

    async def restore_from_location(self) -> None:
        """Follow the ``?c=`` page parameter (startup and back/forward)"""
        session_id = self.page.get_param(SESSION_PARAM)
        if session_id:
            if session_id != self._current_id:
                await self.load_session(session_id)
        elif self._current_id is not None:
            await self.start_new_session()

    async def migrate_legacy_history(self) -> Optional[ChatSession]:
        """
        Import the pre-session single chat history, then drop legacy keys

        Returns:
            The imported session, or None when there was nothing recent
        """
        user_id = self.user_id
        if user_id is None:
            return None

        migrated = None
        history = read_legacy_history(self.storage)
        if history is not None:
            migrated = ChatSession(
                id=generate_session_id(),
                title=make_title(history.messages),
                messages=history.messages,
                owner_user_id=user_id,
                updated_at=history.timestamp,
            )
            sessions = await self._all_sessions(user_id)
            sessions.insert(0, migrated)
            await self._save_all(user_id, sessions[: self.max_sessions])
            logger.info(f"Migrated legacy chat history ({len(history.messages)} messages)")

        remove_legacy_history(self.storage)
        return migrated

    async def handle_auth_event(self, event: "AuthEvent") -> None:
        """Reload sessions on sign-in; forget in-memory state on sign-out"""
        if event.signed_in:
            await self.migrate_legacy_history()
            await self.list_sessions()
            await self.restore_from_location()
        else:
            self._sessions = []
            self._reset()

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def append_message(self, role: MessageRole, content: str) -> ChatMessage:
        """
        Append a message to the current session

        The first message of a new session assigns its id and writes it to
        the page URL.
        """
        message = ChatMessage(role=MessageRole(role), content=content)
        self._messages.append(message)
        if self._current_id is None:
            self._current_id = generate_session_id()
            self.page.set_param(SESSION_PARAM, self._current_id)
        self._changed()
        return message

    def _conversation(self, messages: List[ChatMessage]) -> List[ChatMessage]:
        return [m for m in messages if m.role != MessageRole.SYSTEM]

    async def _ask(self, messages: List[ChatMessage]) -> str:
        if self.client is None:
            raise ChatError("Chatbot backend is not configured")
        try:
            reply = await self.client.chatbot.complete(self._conversation(messages), model=self.model)
        except ValueError as e:
            raise ChatError(f"Unreadable chatbot response: {e}") from e
        if not reply.success or not reply.response:
            raise ChatError(reply.error or "The chatbot returned an empty response")
        return reply.response

    async def _reply(self, messages: List[ChatMessage], error_prefix: str) -> Optional[ChatMessage]:
        self._typing = True
        self._changed()
        try:
            text = await self._ask(messages)
        except HerecoError as e:
            self.append_message(MessageRole.SYSTEM, f"{error_prefix}: {e.user_message}")
            self.notifier.notify_error(e)
            return None
        finally:
            self._typing = False
        return self.append_message(MessageRole.ASSISTANT, text)

    async def send_message(self, content: str) -> Optional[ChatMessage]:
        """
        Send user input and append the assistant's reply

        Empty input, input over 4000 characters and sends while a reply is
        pending are rejected. Failures become a system message in the
        transcript plus an error notification.

        Returns:
            The assistant message, or None if nothing was answered
        """
        text = (content or "").strip()
        if not text or self._typing:
            return None
        if len(text) > MAX_MESSAGE_LENGTH:
            self.notifier.notify(
                f"Message is too long (maximum {MAX_MESSAGE_LENGTH} characters)",
                NotificationLevel.WARNING,
            )
            return None
        if self.user_id is None:
            self.notifier.notify("Authentication required to use AI chatbot", NotificationLevel.ERROR)
            return None

        self.append_message(MessageRole.USER, text)
        reply = await self._reply(self._messages, "Error")
        await self.persist_current_session()
        return reply

    async def regenerate_message(self, message_id: str) -> Optional[ChatMessage]:
        """
        Replace an assistant reply with a fresh one

        The new reply is asked for with the conversation up to the user
        message that prompted the old one, and appended at the end.
        """
        index = next((i for i, m in enumerate(self._messages) if m.id == message_id), None)
        if index is None or self._typing:
            return None

        user_index = next(
            (i for i in range(index - 1, -1, -1) if self._messages[i].role == MessageRole.USER),
            None,
        )
        if user_index is None:
            self.notifier.notify("Cannot regenerate: no user message found", NotificationLevel.ERROR)
            return None

        history = self._messages[: user_index + 1]
        del self._messages[index]
        self._changed()

        reply = await self._reply(history, "Error regenerating response")
        await self.persist_current_session()
        return reply

    def edit_message(self, message_id: str) -> Optional[str]:
        """
        Take a user message back for editing

        Returns:
            The removed message's text, or None if it is not a user message
        """
        message = next((m for m in self._messages if m.id == message_id), None)
        if message is None or message.role != MessageRole.USER:
            return None
        self._messages = [m for m in self._messages if m.id != message_id]
        self._changed()
        return message.content

    async def clear_current_session(self) -> None:
        if not self._messages:
            self.notifier.notify("Chat is already empty", NotificationLevel.INFO)
            return
        self._messages = []
        self._changed()
        await self.persist_current_session()

    def export_current_session(self) -> Optional[Dict[str, Any]]:
        """JSON-ready export of the current conversation"""
        if not self._messages:
            self.notifier.notify("No messages to export", NotificationLevel.INFO)
            return None
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "model": self.model,
            "messages": [m.model_dump(mode="json", by_alias=True) for m in self._messages],
        }
