"""hereco - Python client for the hereco podcast and gallery site"""

from .client import Client
from .async_client import AsyncClient
from .config import EnvironmentResolver
from .auth import (
    AuthUser,
    AuthProvider,
    AuthStateBridge,
    LocalAuthProvider,
    UnavailableAuthProvider,
)
from .chat import ChatSessionStore
from .context import AppContext
from .notifications import Notifier
from .page import PageLocation
from .storage import MemoryStorage, FileStorage
from .views import ViewRenderer
from .exceptions import (
    HerecoError,
    ConfigurationError,
    RequestTimeoutError,
    NetworkError,
    CorsError,
    ChatError,
    AuthenticationError,
    PermissionError,
    NotFoundError,
    ValidationError,
    RateLimitError,
    ServerError,
    APIError,
)
from .version import __version__

__all__ = [
    "Client",
    "AsyncClient",
    "EnvironmentResolver",
    "AuthUser",
    "AuthProvider",
    "AuthStateBridge",
    "LocalAuthProvider",
    "UnavailableAuthProvider",
    "ChatSessionStore",
    "AppContext",
    "Notifier",
    "PageLocation",
    "MemoryStorage",
    "FileStorage",
    "ViewRenderer",
    "HerecoError",
    "ConfigurationError",
    "RequestTimeoutError",
    "NetworkError",
    "CorsError",
    "ChatError",
    "AuthenticationError",
    "PermissionError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    "APIError",
    "__version__",
]
