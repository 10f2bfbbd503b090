"""
Application context

Everything the site needs is built once per page load, in dependency order:
environment -> notifier -> auth bridge -> client -> chat store -> views.
Components receive their collaborators through constructors; nothing is
global.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from .async_client import AsyncClient
from .auth import AuthProvider, AuthStateBridge
from .chat.store import ChatSessionStore
from .config import EnvironmentResolver
from .notifications import Notifier
from .page import PageLocation
from .storage import KeyValueStorage, MemoryStorage
from .views.renderer import ViewRenderer

logger = logging.getLogger(__name__)


def configure_logging(env: EnvironmentResolver) -> None:
    """Root logging setup; the hereco logger follows ENABLE_DEBUG_LOGGING"""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    level = logging.DEBUG if env.is_debug_enabled() else logging.INFO
    logging.getLogger("hereco").setLevel(level)


@dataclass
class AppContext:
    env: EnvironmentResolver
    notifier: Notifier
    bridge: AuthStateBridge
    client: AsyncClient
    store: ChatSessionStore
    views: ViewRenderer
    _tasks: List[asyncio.Task] = field(default_factory=list)
    _cleanups: List[Callable[[], None]] = field(default_factory=list)

    @property
    def page(self) -> PageLocation:
        return self.env.page

    @classmethod
    def create(
        cls,
        url: str,
        html: Optional[str] = None,
        storage: Optional[KeyValueStorage] = None,
        auth_provider: Optional[AuthProvider] = None,
        build_env: Optional[Mapping[str, Any]] = None,
        env_file: Optional[str] = ".env",
        **client_options: Any,
    ) -> "AppContext":
        """
        Build the context for one page load

        An invalid backend URL shows a warning banner but never stops
        startup; requests then fail with ConfigurationError.

        Args:
            url: Page URL
            html: Page HTML carrying ``env-*`` meta tags
            storage: Local storage (in-memory when omitted)
            auth_provider: Authentication service, None when unavailable
            build_env: Build-time variables (read from the environment if None)
            env_file: Dotenv file used when build_env is None
            **client_options: Overrides for the AsyncClient settings
        """
        storage = storage if storage is not None else MemoryStorage()
        page = PageLocation(url)

        env = EnvironmentResolver(page, html=html, build_env=build_env, storage=storage, env_file=env_file)
        env.load()
        configure_logging(env)
        env.log_configuration()

        notifier = Notifier(detailed_errors=env.is_detailed_errors_enabled())
        validation = env.validate_backend_url()
        if not validation.valid:
            notifier.show_banner(validation.message)

        bridge = AuthStateBridge(auth_provider)
        client = AsyncClient.from_environment(env, token_provider=bridge.get_id_token, **client_options)
        store = ChatSessionStore(
            page,
            storage,
            client=client,
            bridge=bridge,
            notifier=notifier,
            model=env.chat_model,
        )
        views = ViewRenderer(items_per_page=env.items_per_page)

        logger.info(f"Application context created ({env.environment}, backend {env.backend_api_url or 'not configured'})")
        return cls(env=env, notifier=notifier, bridge=bridge, client=client, store=store, views=views)

    async def start(self) -> None:
        """
        Wire the components together and restore the page state

        Must run inside an event loop: auth events are followed by a
        background task.
        """
        self._tasks.append(asyncio.create_task(self._follow_auth(self.bridge.events())))
        # Let the follower register its queue before the provider reports the initial user
        await asyncio.sleep(0)
        self.bridge.start()

        loop = asyncio.get_running_loop()

        def on_popstate(page: PageLocation) -> None:
            task = loop.create_task(self.store.restore_from_location())
            self._tasks.append(task)
            task.add_done_callback(self._forget_task)

        self._cleanups.append(self.page.on_popstate(on_popstate))
        await self.store.restore_from_location()

    def _forget_task(self, task: asyncio.Task) -> None:
        if task in self._tasks:
            self._tasks.remove(task)

    async def _follow_auth(self, events) -> None:
        async for event in events:
            await self.store.handle_auth_event(event)

    async def aclose(self) -> None:
        for cleanup in self._cleanups:
            cleanup()
        self._cleanups.clear()
        self.bridge.stop()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        await self.client.close()
