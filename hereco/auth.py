"""
Auth State Bridge

Translates the external authentication provider's state changes into
navigation chrome and into events for the rest of the site. The bridge is the
only subscriber to the provider; everything else listens to the bridge.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

PLACEHOLDER_AVATAR = "https://via.placeholder.com/32x32/666/fff?text={initial}"


class AuthUser(BaseModel):
    """Signed-in user as reported by the provider"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    photo_url: Optional[str] = Field(None, alias="photoURL")


AuthStateCallback = Callable[[Optional[AuthUser]], None]
Unsubscribe = Callable[[], None]


class AuthProvider(ABC):
    """Interface of an external authentication service"""

    @property
    @abstractmethod
    def current_user(self) -> Optional[AuthUser]:
        pass

    @abstractmethod
    def on_auth_state_changed(self, callback: AuthStateCallback) -> Unsubscribe:
        """
        Register for sign-in/sign-out notifications

        Args:
            callback: Called with the new user, or None after sign-out

        Returns:
            Callable that removes the registration
        """
        pass

    @abstractmethod
    async def get_id_token(self) -> Optional[str]:
        """ID token of the current user, or None when signed out"""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass


class UnavailableAuthProvider(AuthProvider):
    """Stand-in used when no authentication service is configured"""

    @property
    def current_user(self) -> Optional[AuthUser]:
        return None

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Unsubscribe:
        return lambda: None

    async def get_id_token(self) -> Optional[str]:
        return None

    async def sign_out(self) -> None:
        logger.warning("Sign-out requested but no authentication provider is available")


class LocalAuthProvider(AuthProvider):
    """
    In-process provider for development and tests.

    ``sign_in`` and ``sign_out`` notify every registered callback the way a
    hosted provider would.
    """

    def __init__(self, user: Optional[AuthUser] = None, token: str = "local-token"):
        self._user = user
        self._token = token
        self._callbacks: List[AuthStateCallback] = []

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._user

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Unsubscribe:
        self._callbacks.append(callback)
        # Hosted providers report the initial state right after registration
        callback(self._user)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def sign_in(self, user: AuthUser) -> None:
        self._user = user
        self._notify()

    async def sign_out(self) -> None:
        self._user = None
        self._notify()

    async def get_id_token(self) -> Optional[str]:
        if self._user is None:
            return None
        return f"{self._token}:{self._user.uid}"

    def _notify(self) -> None:
        for callback in list(self._callbacks):
            callback(self._user)


@dataclass(frozen=True)
class AuthEvent:
    """A transition of the signed-in user"""

    user: Optional[AuthUser]
    previous: Optional[AuthUser] = None

    @property
    def signed_in(self) -> bool:
        return self.user is not None


class NavigationChrome(BaseModel):
    """What the site header shows for the current auth state"""

    model_config = ConfigDict(frozen=True)

    show_auth_links: bool = True
    display_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def for_user(cls, user: Optional[AuthUser]) -> "NavigationChrome":
        if user is None:
            return cls()
        display_name = user.display_name
        if not display_name and user.email:
            display_name = user.email.split("@")[0]
        display_name = display_name or "User"
        avatar_url = user.photo_url or PLACEHOLDER_AVATAR.format(initial=display_name[0].upper())
        return cls(
            show_auth_links=False,
            display_name=display_name,
            email=user.email,
            avatar_url=avatar_url,
        )


AuthListener = Callable[[AuthEvent], None]


class AuthStateBridge:
    """
    Single subscription to an AuthProvider, fanned out to the site.

    Synchronous listeners registered with ``subscribe`` run inside the
    provider callback; ``events()`` gives each async consumer its own queue so
    every consumer sees every transition.

    Example:
        >>> bridge = AuthStateBridge(LocalAuthProvider())
        >>> bridge.start()
        >>> bridge.subscribe(lambda event: print(event.user))
    """

    def __init__(self, provider: Optional[AuthProvider] = None):
        self.provider = provider or UnavailableAuthProvider()
        self._current_user: Optional[AuthUser] = None
        self._chrome = NavigationChrome()
        self._listeners: List[AuthListener] = []
        self._queues: List[asyncio.Queue] = []
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def available(self) -> bool:
        return not isinstance(self.provider, UnavailableAuthProvider)

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._current_user

    @property
    def chrome(self) -> NavigationChrome:
        return self._chrome

    def start(self) -> None:
        """Subscribe to the provider; calling it again has no effect"""
        if self._unsubscribe is not None:
            return
        if not self.available:
            logger.info("Authentication provider unavailable, running signed out")
        self._unsubscribe = self.provider.on_auth_state_changed(self._on_provider_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        """
        Register a synchronous listener for auth transitions

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def events(self) -> AsyncIterator[AuthEvent]:
        """Async stream of auth transitions, independent per consumer"""
        queue: asyncio.Queue = asyncio.Queue()
        self._queues.append(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues.remove(queue)

    def _on_provider_change(self, user: Optional[AuthUser]) -> None:
        previous = self._current_user
        self._current_user = user
        self._chrome = NavigationChrome.for_user(user)

        if user is not None:
            logger.info(f"User signed in: {user.email or user.uid}")
        elif previous is not None:
            logger.info("User signed out")

        event = AuthEvent(user=user, previous=previous)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Auth listener failed: {e}", exc_info=True)
        for queue in list(self._queues):
            queue.put_nowait(event)

    async def get_id_token(self) -> Optional[str]:
        """Current user's ID token, or None when unavailable"""
        if self._current_user is None:
            return None
        try:
            return await self.provider.get_id_token()
        except Exception as e:
            logger.error(f"Failed to get ID token: {e}")
            return None

    async def sign_out(self) -> None:
        await self.provider.sign_out()
