"""Asynchronous hereco backend client"""

import logging
from typing import Any, Awaitable, Callable, Optional

import httpx
from tenacity import AsyncRetrying

from ._base_client import BaseClient
from .exceptions import ConfigurationError, CorsError, HerecoError
from .resources import (
    AsyncPodcastResource,
    AsyncFilesResource,
    AsyncStorageResource,
    AsyncCacheResource,
    AsyncHealthResource,
    AsyncChatbotResource,
    AsyncAdminResource,
)
from .types.system import ConnectionTestResult

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[Optional[str]]]


class AsyncClient(BaseClient):
    """
    Asynchronous client for the hereco backend API.

    Besides a static ``api_key`` it accepts a ``token_provider`` coroutine
    function, called before every request, so the bearer token always comes
    from the signed-in user (see ``AuthStateBridge.get_id_token``).

    Example:
        >>> async with AsyncClient(base_url="https://api.example.com") as client:
        ...     episodes = await client.podcast.episodes()
        ...     reply = await client.chatbot.complete(messages, model="gemini-1.5-8b")
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        **kwargs: Any,
    ):
        """
        Initialize asynchronous hereco client.

        Args:
            base_url: Backend base URL
            token_provider: Coroutine function returning a bearer token or None
            **kwargs: Timeout, retry, cache and auth settings (see BaseClient)
        """
        super().__init__(base_url, **kwargs)
        self.token_provider = token_provider

        # Initialize async HTTP client
        self._http_client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
        )

        # Initialize async resource instances
        self.podcast = AsyncPodcastResource(self)
        self.files = AsyncFilesResource(self)
        self.storage = AsyncStorageResource(self)
        self.cache = AsyncCacheResource(self)
        self.health = AsyncHealthResource(self)
        self.chatbot = AsyncChatbotResource(self)
        self.admin = AsyncAdminResource(self)

    async def _get_token(self) -> Optional[str]:
        if self.token_provider is None:
            return self.api_key
        try:
            token = await self.token_provider()
        except Exception as e:
            logger.error(f"Failed to get auth token: {e}")
            token = None
        return token or self.api_key

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an async HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: Request path (e.g., "/api/chatbot/gemini")
            **kwargs: Additional arguments passed to httpx (json, params, etc.)

        Returns:
            httpx.Response: Successful response

        Raises:
            ConfigurationError: Backend URL missing or invalid (no request sent)
            RequestTimeoutError: Every attempt timed out
            NetworkError: Every attempt failed at the transport level
            CorsError: Cross-origin request rejected
            AuthenticationError: Invalid token (401)
            PermissionError: Insufficient permissions (403)
            NotFoundError: Resource not found (404)
            ValidationError: Invalid request (422)
            RateLimitError: Rate limit exceeded (429)
            ServerError: Every attempt returned 5xx
            APIError: Other failures
        """
        self._check_configuration()

        headers = self._get_headers(method, await self._get_token())
        headers.update(kwargs.pop("headers", None) or {})
        url = self._prepare_request_url(path)

        async for attempt in AsyncRetrying(**self._retry_options()):
            with attempt:
                response = await self._send(method, url, headers=headers, **kwargs)
        return response

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http_client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise self._process_exception(method, url, e) from e
        return self._process_response(method, url, response)

    async def test_backend_connection(self) -> ConnectionTestResult:
        """
        Probe the backend health endpoint

        Returns:
            ConnectionTestResult: success flag plus a message, or an error and
            its type (configuration, cors or network)
        """
        try:
            health = await self.health.check()
        except ConfigurationError as e:
            return ConnectionTestResult(success=False, error=e.message, type="configuration")
        except CorsError as e:
            return ConnectionTestResult(success=False, error=e.user_message, type="cors")
        except HerecoError as e:
            return ConnectionTestResult(success=False, error=e.message, type="network")
        return ConnectionTestResult(success=True, message="Backend connection successful", health=health)

    async def close(self) -> None:
        """Close the async HTTP client"""
        if self._http_client:
            await self._http_client.aclose()

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
        return False
