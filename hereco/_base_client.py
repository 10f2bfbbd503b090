"""Base client implementation with shared logic for sync and async clients"""

import logging
from typing import Optional, Any, Dict, TYPE_CHECKING

import httpx
from tenacity import (
    stop_after_attempt,
    wait_incrementing,
    retry_if_exception_type,
    before_sleep_log,
)

from ._cache import ResponseCache
from .config import check_backend_url
from .version import __version__
from .exceptions import (
    HerecoError,
    ConfigurationError,
    RequestTimeoutError,
    NetworkError,
    CorsError,
    AuthenticationError,
    PermissionError,
    NotFoundError,
    ValidationError,
    RateLimitError,
    ServerError,
    APIError,
)
from .types.system import ConnectionStatus

if TYPE_CHECKING:
    from .config import EnvironmentResolver

logger = logging.getLogger(__name__)

# Only transient failures are retried; CORS, configuration and 4xx errors
# fail on the first attempt.
RETRYABLE_ERRORS = (RequestTimeoutError, NetworkError, ServerError)

BODYLESS_METHODS = ("GET", "HEAD")


class BaseClient:
    """
    Base client with shared logic for HTTP requests and error handling.

    This class provides:
    - Backend URL validation before any request is sent
    - Default and authentication headers
    - Failure classification and exception mapping
    - Linear-backoff retry options for tenacity
    - The in-memory response cache and connection status
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        api_key: Optional[str] = None,
        origin: Optional[str] = None,
        cache_ttl: float = 300.0,
        cache_size: int = 50,
        cache_enabled: bool = True,
        admin_key: Optional[str] = None,
    ):
        """
        Initialize base client.

        The backend URL is not validated here: a missing or invalid URL must
        not block startup, so it is reported by the first request instead.

        Args:
            base_url: Backend base URL, e.g. https://api.example.com
            timeout: Request timeout in seconds (default: 30.0)
            max_retries: Total attempts per request, first one included (default: 3)
            retry_delay: Base delay in seconds; attempt n waits n * retry_delay (default: 1.0)
            api_key: Static bearer token (optional)
            origin: Origin of the page issuing requests; enables CORS checks
            cache_ttl: Response cache lifetime in seconds
            cache_size: Maximum number of cached responses
            cache_enabled: Whether GET results are cached
            admin_key: Key sent with admin endpoints
        """
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = max(0.0, retry_delay)
        self.api_key = api_key
        self.origin = origin.rstrip("/") if origin else None
        self.admin_key = admin_key
        self.response_cache = ResponseCache(ttl_seconds=cache_ttl, max_size=cache_size, enabled=cache_enabled)

        self._connection_status = ConnectionStatus(
            backend_url=self.base_url,
            cross_origin=self.is_cross_origin,
        )

        # Will be set by subclasses
        self._http_client = None

    @classmethod
    def _settings_from_environment(cls, env: "EnvironmentResolver") -> Dict[str, Any]:
        return {
            "base_url": env.backend_api_url,
            "timeout": env.api_timeout / 1000,
            "max_retries": env.api_retry_attempts,
            "retry_delay": env.api_retry_delay / 1000,
            "origin": env.page.origin,
            "cache_ttl": env.cache_duration / 1000,
            "cache_size": env.max_cache_size,
            "cache_enabled": env.is_frontend_caching_enabled(),
            "admin_key": env.get("ADMIN_KEY"),
        }

    @classmethod
    def from_environment(cls, env: "EnvironmentResolver", **kwargs: Any):
        """
        Build a client from a resolved configuration snapshot

        Keyword arguments override the values taken from the environment.
        """
        settings = cls._settings_from_environment(env)
        settings.update(kwargs)
        return cls(**settings)

    @property
    def backend_origin(self) -> Optional[str]:
        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL:
            return None
        if not url.host:
            return None
        origin = f"{url.scheme}://{url.host}"
        if url.port is not None:
            origin += f":{url.port}"
        return origin

    @property
    def is_cross_origin(self) -> bool:
        return bool(self.origin) and self.backend_origin != self.origin

    def _check_configuration(self) -> None:
        """
        Raise before any network activity when the backend URL is unusable

        Raises:
            ConfigurationError: URL empty, equal to the page origin, or malformed
        """
        validation = check_backend_url(self.base_url, self.origin)
        if not validation.valid:
            raise ConfigurationError(validation.message)

    def _get_headers(self, method: str, token: Optional[str] = None) -> Dict[str, str]:
        """
        Get default and authentication headers for a request

        Args:
            method: HTTP method; GET and HEAD carry no Content-Type
            token: Bearer token (optional)

        Returns:
            Dict of headers
        """
        headers = {
            "Accept": "application/json",
            "User-Agent": f"hereco-python/{__version__}",
        }

        if method.upper() not in BODYLESS_METHODS:
            headers["Content-Type"] = "application/json"

        if token:
            headers["Authorization"] = f"Bearer {token}"

        if self.is_cross_origin:
            headers["Origin"] = self.origin

        return headers

    def _prepare_request_url(self, path: str) -> str:
        """
        Prepare full URL from path

        Args:
            path: Request path (e.g., "/api/files") or full URL

        Returns:
            str: Full URL for request
        """
        return path if path.startswith("http") else f"{self.base_url}{path}"

    def _retry_options(self) -> Dict[str, Any]:
        """Keyword arguments for tenacity's Retrying / AsyncRetrying"""
        return {
            "stop": stop_after_attempt(self.max_retries),
            "wait": wait_incrementing(start=self.retry_delay, increment=self.retry_delay),
            "retry": retry_if_exception_type(RETRYABLE_ERRORS),
            "before_sleep": before_sleep_log(logger, logging.WARNING),
            "reraise": True,
        }

    def _classify_exception(self, exc: httpx.RequestError) -> HerecoError:
        """
        Translate a transport failure into a client exception

        Args:
            exc: Exception raised by httpx

        Returns:
            RequestTimeoutError, CorsError or NetworkError
        """
        if isinstance(exc, httpx.TimeoutException):
            return RequestTimeoutError(f"Request timed out after {self.timeout}s: {exc}")

        text = str(exc)
        if "cors" in text.lower():
            return CorsError(f"Cross-origin request blocked: {text}")
        return NetworkError(f"Network error: {text}")

    def _check_cors(self, response: httpx.Response) -> None:
        """
        Reject cross-origin responses the backend did not allow

        Raises:
            CorsError: Access-Control-Allow-Origin missing or not matching
        """
        if not self.is_cross_origin:
            return

        allowed = response.headers.get("access-control-allow-origin")
        if allowed not in ("*", self.origin):
            raise CorsError(
                f"Backend at {self.backend_origin} does not allow requests from {self.origin}",
                response.status_code,
            )

    def _handle_error(self, response: httpx.Response) -> None:
        """
        Handle error responses and raise appropriate exceptions.

        Args:
            response: HTTP response object

        Raises:
            AuthenticationError: For 401 responses
            PermissionError: For 403 responses
            NotFoundError: For 404 responses
            ValidationError: For 422 responses
            RateLimitError: For 429 responses
            ServerError: For 5xx responses
            APIError: For other error responses
        """
        if response.is_success:
            return

        status_code = response.status_code
        message = None
        try:
            error_data = response.json()
        except ValueError:
            error_data = None
        if isinstance(error_data, dict):
            message = error_data.get("detail") or error_data.get("error") or error_data.get("message")
        if not message:
            message = response.text or f"HTTP {status_code} error"

        # Map status codes to exception types
        if status_code == 401:
            raise AuthenticationError(message, status_code)
        elif status_code == 403:
            raise PermissionError(message, status_code)
        elif status_code == 404:
            raise NotFoundError(message, status_code)
        elif status_code == 422:
            raise ValidationError(message, status_code)
        elif status_code == 429:
            raise RateLimitError(message, status_code)
        elif status_code >= 500:
            raise ServerError(message, status_code)
        else:
            raise APIError(message, status_code)

    def _process_response(self, method: str, url: str, response: httpx.Response) -> httpx.Response:
        """Run CORS and status checks on a response, recording the outcome"""
        try:
            self._check_cors(response)
        except CorsError:
            self._record_connection(valid=False, cors_enabled=False)
            raise

        # The server answered, so the connection itself works
        self._record_connection(valid=True)
        if not response.is_success:
            logger.warning(f"{method} {url} failed with HTTP {response.status_code}")
        self._handle_error(response)
        return response

    def _process_exception(self, method: str, url: str, exc: httpx.RequestError) -> HerecoError:
        """Classify a transport failure, recording the outcome"""
        error = self._classify_exception(exc)
        logger.warning(f"{method} {url} failed: {error.message}")
        self._record_connection(valid=False, cors_enabled=not isinstance(error, CorsError))
        return error

    def _record_connection(self, valid: bool, cors_enabled: bool = True) -> None:
        self._connection_status = ConnectionStatus(
            tested=True,
            valid=valid,
            backend_url=self.base_url,
            cors_enabled=cors_enabled,
            cross_origin=self.is_cross_origin,
        )

    def connection_status(self) -> ConnectionStatus:
        """Last observed state of the backend connection"""
        return self._connection_status.model_copy()

    def reset_connection_status(self) -> None:
        self._connection_status = ConnectionStatus(
            backend_url=self.base_url,
            cross_origin=self.is_cross_origin,
        )

    def _admin_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Query parameters for admin endpoints

        Raises:
            ValueError: If no admin key is configured
        """
        if not self.admin_key:
            raise ValueError("admin_key is required for admin endpoints")
        merged = dict(params or {})
        merged["admin_key"] = self.admin_key
        return merged

    def close(self) -> None:
        """Close the HTTP client"""
        if self._http_client:
            self._http_client.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
        return False
