"""Synchronous hereco backend client"""

from typing import Any

import httpx
from tenacity import Retrying

from ._base_client import BaseClient
from .exceptions import ConfigurationError, CorsError, HerecoError
from .resources import (
    PodcastResource,
    FilesResource,
    StorageResource,
    CacheResource,
    HealthResource,
    ChatbotResource,
    AdminResource,
)
from .types.system import ConnectionTestResult


class Client(BaseClient):
    """
    Synchronous client for the hereco backend API.

    Provides access to every backend resource with URL validation, linear
    retry, failure classification and an in-memory cache for GET endpoints.

    Example:
        >>> client = Client(base_url="https://api.example.com")
        >>> episodes = client.podcast.episodes(limit=10)
        >>> client.close()

        # Or using context manager:
        >>> with Client(base_url="https://api.example.com") as client:
        ...     files = client.files.list(page=1, limit=12)
    """

    def __init__(self, base_url: str, **kwargs: Any):
        """
        Initialize synchronous hereco client.

        Args:
            base_url: Backend base URL
            **kwargs: Timeout, retry, cache and auth settings (see BaseClient)

        Example:
            >>> client = Client(
            ...     base_url="https://api.example.com",
            ...     timeout=10.0,
            ...     max_retries=5,
            ...     retry_delay=0.5,
            ... )
        """
        super().__init__(base_url, **kwargs)

        # Initialize HTTP client
        self._http_client = httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
        )

        # Initialize resource instances
        self.podcast = PodcastResource(self)
        self.files = FilesResource(self)
        self.storage = StorageResource(self)
        self.cache = CacheResource(self)
        self.health = HealthResource(self)
        self.chatbot = ChatbotResource(self)
        self.admin = AdminResource(self)

    def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: Request path (e.g., "/api/files")
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

        headers = self._get_headers(method, self.api_key)
        headers.update(kwargs.pop("headers", None) or {})
        url = self._prepare_request_url(path)

        for attempt in Retrying(**self._retry_options()):
            with attempt:
                response = self._send(method, url, headers=headers, **kwargs)
        return response

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http_client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise self._process_exception(method, url, e) from e
        return self._process_response(method, url, response)

    def test_backend_connection(self) -> ConnectionTestResult:
        """
        Probe the backend health endpoint

        Returns:
            ConnectionTestResult: success flag plus a message, or an error and
            its type (configuration, cors or network)
        """
        try:
            health = self.health.check()
        except ConfigurationError as e:
            return ConnectionTestResult(success=False, error=e.message, type="configuration")
        except CorsError as e:
            return ConnectionTestResult(success=False, error=e.user_message, type="cors")
        except HerecoError as e:
            return ConnectionTestResult(success=False, error=e.message, type="network")
        return ConnectionTestResult(success=True, message="Backend connection successful", health=health)
