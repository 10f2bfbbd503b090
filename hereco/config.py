"""
Runtime environment configuration for the hereco client

Builds one configuration snapshot per page load from five sources, lowest to
highest precedence:

1. compiled-in defaults
2. build-time injection (pydantic-settings: process environment and .env)
3. HTML meta tags (``<meta name="env-backend-api-url" content="...">``)
4. URL parameters (``?env=KEY=VALUE``, repeatable)
5. developer overrides in local storage (local hostnames only)
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

import httpx
from bs4 import BeautifulSoup
from pydantic_settings import BaseSettings, SettingsConfigDict

from .page import PageLocation
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

LOCAL_OVERRIDES_KEY = "__DEV_CONFIG__"
DEVELOPMENT_HOSTS = ("localhost", "127.0.0.1")
STAGING_HOST_MARKERS = ("staging", "preview", "test")
LOCAL_BACKEND_DEFAULT = "http://localhost:3000"

DEFAULTS: Dict[str, str] = {
    # Backend API (empty means "page origin", see EnvironmentResolver._defaults)
    "BACKEND_API_URL": "",
    "NODE_ENV": "development",

    # API settings (milliseconds)
    "API_TIMEOUT": "30000",
    "API_RETRY_ATTEMPTS": "3",
    "API_RETRY_DELAY": "1000",

    # Feature flags
    "ENABLE_DEBUG_LOGGING": "false",
    "ENABLE_DEVELOPMENT_TOOLS": "false",
    "ENABLE_DEVTOOLS": "false",
    "ENABLE_DETAILED_ERRORS": "false",
    "ENABLE_PERFORMANCE_MONITORING": "false",
    "ENABLE_ERROR_REPORTING": "false",

    # Cache
    "ENABLE_FRONTEND_CACHING": "true",
    "CACHE_DURATION": "300000",
    "MAX_CACHE_SIZE": "50",

    # Presentation
    "ITEMS_PER_PAGE": "12",

    # CORS (empty means "page origin")
    "CORS_ORIGINS": "",

    # Local backend switch
    "LOCAL_DEV_MODE": "false",
    "LOCAL_BACKEND_URL": "",

    # Chatbot / admin
    "CHAT_MODEL": "gemini-1.5-8b",
    "ADMIN_KEY": "",
}

# Flags that are never honoured in production
DEBUG_FLAGS = (
    "ENABLE_DEBUG_LOGGING",
    "ENABLE_DEVELOPMENT_TOOLS",
    "ENABLE_DEVTOOLS",
    "ENABLE_DETAILED_ERRORS",
)

TRUE_VALUES = ("true", "1", "yes", "on")
FALSE_VALUES = ("false", "0", "no", "off")


class ConfigSource(str, Enum):
    """Where a configuration value came from"""
    DEFAULTS = "defaults"
    BUILD_TIME = "build_time"
    DETECTED = "detected"
    META_TAGS = "meta_tags"
    URL_PARAMS = "url_params"
    LOCAL_OVERRIDES = "local_overrides"
    ENVIRONMENT_POLICY = "environment_policy"


class UrlValidation(NamedTuple):
    valid: bool
    message: str


class BuildTimeSettings(BaseSettings):
    """Variables injected when the site is built, read from the environment"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    BACKEND_API_URL: Optional[str] = None
    NODE_ENV: Optional[str] = None
    API_TIMEOUT: Optional[str] = None
    API_RETRY_ATTEMPTS: Optional[str] = None
    API_RETRY_DELAY: Optional[str] = None
    ENABLE_DEBUG_LOGGING: Optional[str] = None
    ENABLE_DEVELOPMENT_TOOLS: Optional[str] = None
    ENABLE_DETAILED_ERRORS: Optional[str] = None
    ENABLE_FRONTEND_CACHING: Optional[str] = None
    CACHE_DURATION: Optional[str] = None
    MAX_CACHE_SIZE: Optional[str] = None
    ITEMS_PER_PAGE: Optional[str] = None
    CORS_ORIGINS: Optional[str] = None
    CHAT_MODEL: Optional[str] = None
    ADMIN_KEY: Optional[str] = None


def load_build_time_env(env_file: Optional[str] = ".env") -> Dict[str, str]:
    """
    Read build-time variables from the process environment and a .env file

    Args:
        env_file: Path of the dotenv file (None to skip it)

    Returns:
        Mapping of the variables that are set
    """
    settings = BuildTimeSettings(_env_file=env_file)
    return settings.model_dump(exclude_none=True)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _non_empty(values: Mapping[str, Any]) -> Dict[str, str]:
    """Normalize keys to upper case and drop empty values"""
    result = {}
    for key, value in values.items():
        if value is None:
            continue
        text = _stringify(value)
        if text == "":
            continue
        result[str(key).upper()] = text
    return result


def parse_meta_tags(html: str) -> Dict[str, str]:
    """
    Extract ``env-*`` meta tags from an HTML document

    ``<meta name="env-backend-api-url" content="https://api">`` becomes
    ``{"BACKEND_API_URL": "https://api"}``.
    """
    soup = BeautifulSoup(html, "html.parser")
    values = {}
    for meta in soup.find_all("meta"):
        name = meta.get("name") or ""
        if not name.startswith("env-"):
            continue
        content = meta.get("content")
        if not content:
            continue
        key = name[len("env-"):].replace("-", "_").upper()
        values[key] = content
    return values


def parse_url_params(page: PageLocation) -> Dict[str, str]:
    """Collect ``?env=KEY=VALUE`` parameters; the value may itself contain '='"""
    values = {}
    for param in page.get_all_params("env"):
        key, sep, value = param.partition("=")
        key = key.strip()
        if key and sep and value:
            values[key.upper()] = value
    return values


def check_backend_url(url: Optional[str], page_origin: Optional[str] = None) -> UrlValidation:
    """
    Validate a backend base URL

    The page origin counts as "not configured": the site is static and never
    serves the API itself.
    """
    url = (url or "").rstrip("/")
    if not url or (page_origin and url == page_origin.rstrip("/")):
        return UrlValidation(
            False,
            "Backend API URL not configured. Please update BACKEND_API_URL in your environment configuration.",
        )
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        parsed = None
    if parsed is None or parsed.scheme not in ("http", "https") or not parsed.host:
        return UrlValidation(
            False,
            "Invalid backend URL format. Please check your BACKEND_API_URL configuration.",
        )
    return UrlValidation(True, "Backend URL is valid")


def detect_environment(hostname: str) -> str:
    """Guess the deployment environment from the page hostname"""
    hostname = (hostname or "").lower()
    if hostname in DEVELOPMENT_HOSTS:
        return "development"
    if any(marker in hostname for marker in STAGING_HOST_MARKERS):
        return "staging"
    return "production"


class EnvironmentResolver:
    """
    Configuration snapshot for one page load.

    Values are strings; typed accessors parse them on read. The snapshot is
    built lazily on first access (or by an explicit ``load()``) and then only
    changes through ``set()``.

    Example:
        >>> page = PageLocation("http://localhost:8080/?env=API_TIMEOUT=5000")
        >>> env = EnvironmentResolver(page, build_env={})
        >>> env.api_timeout
        5000
    """

    def __init__(
        self,
        page: PageLocation,
        html: Optional[str] = None,
        build_env: Optional[Mapping[str, Any]] = None,
        storage: Optional[KeyValueStorage] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        env_file: Optional[str] = ".env",
    ):
        """
        Args:
            page: Current page location (hostname and ``?env=`` parameters)
            html: Page HTML to scan for ``env-*`` meta tags
            build_env: Build-time variables; read via pydantic-settings if None
            storage: Local storage holding developer overrides
            defaults: Extra defaults merged over the compiled-in ones
            env_file: Dotenv file used when build_env is None
        """
        self.page = page
        self.html = html
        self.build_env = build_env
        self.storage = storage
        self.extra_defaults = dict(defaults or {})
        self.env_file = env_file

        self._snapshot: Optional[Dict[str, str]] = None
        self._sources: Dict[str, ConfigSource] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def is_local_host(self) -> bool:
        return (self.page.hostname or "").lower() in DEVELOPMENT_HOSTS

    def load(self) -> "EnvironmentResolver":
        """Build the snapshot (idempotent)"""
        if self._snapshot is not None:
            return self

        snapshot: Dict[str, str] = {}
        sources: Dict[str, ConfigSource] = {}
        for source, values in self._layers():
            for key, value in values.items():
                snapshot[key] = value
                sources[key] = source

        self._snapshot = snapshot
        self._sources = sources
        self._apply_environment_policy()

        logger.debug(f"Environment configuration loaded: {self._snapshot}")
        return self

    def _defaults(self) -> Dict[str, str]:
        values = dict(DEFAULTS)
        values["BACKEND_API_URL"] = self.page.origin
        values["CORS_ORIGINS"] = self.page.origin
        for key, value in self.extra_defaults.items():
            values[str(key).upper()] = _stringify(value)
        return values

    def _layers(self) -> List[Tuple[ConfigSource, Dict[str, str]]]:
        build_env = self.build_env
        if build_env is None:
            build_env = load_build_time_env(self.env_file)

        layers = [
            (ConfigSource.DEFAULTS, self._defaults()),
            (ConfigSource.BUILD_TIME, _non_empty(build_env)),
            (ConfigSource.DETECTED, {"NODE_ENV": detect_environment(self.page.hostname)}),
        ]
        if self.html:
            layers.append((ConfigSource.META_TAGS, parse_meta_tags(self.html)))
        layers.append((ConfigSource.URL_PARAMS, parse_url_params(self.page)))
        layers.append((ConfigSource.LOCAL_OVERRIDES, self._local_overrides()))
        return layers

    def _local_overrides(self) -> Dict[str, str]:
        if not self.is_local_host or self.storage is None:
            return {}
        stored = self.storage.get_json(LOCAL_OVERRIDES_KEY, {})
        if not isinstance(stored, dict):
            logger.warning(f"Ignoring malformed {LOCAL_OVERRIDES_KEY} entry in local storage")
            return {}
        return _non_empty(stored)

    def _apply_environment_policy(self) -> None:
        snapshot = self._snapshot

        # A local page with no configured backend talks to the local backend
        if self.is_local_host and self._sources.get("BACKEND_API_URL") == ConfigSource.DEFAULTS:
            snapshot["BACKEND_API_URL"] = LOCAL_BACKEND_DEFAULT
            self._sources["BACKEND_API_URL"] = ConfigSource.ENVIRONMENT_POLICY

        if snapshot.get("NODE_ENV") == "production":
            for flag in DEBUG_FLAGS:
                if snapshot.get(flag, "false") != "false":
                    logger.info(f"{flag} is disabled in production")
                snapshot[flag] = "false"
                self._sources[flag] = ConfigSource.ENVIRONMENT_POLICY

    def _ensure_loaded(self) -> Dict[str, str]:
        if self._snapshot is None:
            self.load()
        return self._snapshot

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a configuration value

        Args:
            key: Configuration key (case-insensitive)
            default: Returned when the key is unset or empty

        Returns:
            The string value, or default
        """
        value = self._ensure_loaded().get(key.upper())
        if value is None or value == "":
            return default
        return value

    def get_all(self) -> Dict[str, str]:
        """Copy of the full snapshot"""
        return dict(self._ensure_loaded())

    def source_of(self, key: str) -> Optional[ConfigSource]:
        """Which source supplied the current value of a key"""
        self._ensure_loaded()
        return self._sources.get(key.upper())

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        logger.warning(f"Invalid boolean for {key}: {value!r}, using {default}")
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            logger.warning(f"Invalid number for {key}: {value!r}, using {default}")
            return default

    def set(self, key: str, value: Any) -> bool:
        """
        Set a developer override (local hostnames only)

        The override is written to local storage so it survives reloads.

        Returns:
            True if the value was applied
        """
        if not self.is_local_host:
            logger.warning("Configuration can only be modified in development mode")
            return False

        key = key.upper()
        text = _stringify(value)
        snapshot = self._ensure_loaded()
        snapshot[key] = text
        self._sources[key] = ConfigSource.LOCAL_OVERRIDES

        if self.storage is not None:
            overrides = self.storage.get_json(LOCAL_OVERRIDES_KEY, {})
            if not isinstance(overrides, dict):
                overrides = {}
            overrides[key] = text
            self.storage.set_json(LOCAL_OVERRIDES_KEY, overrides)
        return True

    # ------------------------------------------------------------------
    # Typed getters
    # ------------------------------------------------------------------

    @property
    def environment(self) -> str:
        return self.get("NODE_ENV", "production")

    def is_development(self) -> bool:
        return self.environment == "development"

    def is_production(self) -> bool:
        return self.environment == "production"

    def is_staging(self) -> bool:
        return self.environment == "staging"

    def is_debug_enabled(self) -> bool:
        return self.get_bool("ENABLE_DEBUG_LOGGING")

    def are_development_tools_enabled(self) -> bool:
        return self.get_bool("ENABLE_DEVELOPMENT_TOOLS")

    def is_detailed_errors_enabled(self) -> bool:
        return self.get_bool("ENABLE_DETAILED_ERRORS")

    def is_frontend_caching_enabled(self) -> bool:
        return self.get_bool("ENABLE_FRONTEND_CACHING", True)

    @property
    def backend_api_url(self) -> str:
        if self.get_bool("LOCAL_DEV_MODE") and self.get("LOCAL_BACKEND_URL"):
            url = self.get("LOCAL_BACKEND_URL")
        else:
            url = self.get("BACKEND_API_URL", "")
        return url.rstrip("/")

    @property
    def api_timeout(self) -> int:
        """Request timeout in milliseconds"""
        return self.get_int("API_TIMEOUT", 30000)

    @property
    def api_retry_attempts(self) -> int:
        return max(1, self.get_int("API_RETRY_ATTEMPTS", 3))

    @property
    def api_retry_delay(self) -> int:
        """Base retry delay in milliseconds"""
        return max(0, self.get_int("API_RETRY_DELAY", 1000))

    @property
    def items_per_page(self) -> int:
        return self.get_int("ITEMS_PER_PAGE", 12)

    @property
    def cache_duration(self) -> int:
        """Response cache lifetime in milliseconds"""
        return self.get_int("CACHE_DURATION", 300000)

    @property
    def max_cache_size(self) -> int:
        return self.get_int("MAX_CACHE_SIZE", 50)

    @property
    def cors_origins(self) -> List[str]:
        raw = self.get("CORS_ORIGINS", self.page.origin)
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    @property
    def chat_model(self) -> str:
        return self.get("CHAT_MODEL", DEFAULTS["CHAT_MODEL"])

    def validate_backend_url(self) -> UrlValidation:
        """Check that the backend URL is configured and well-formed"""
        return check_backend_url(self.backend_api_url, self.page.origin)

    def log_configuration(self) -> None:
        """Dump the snapshot at debug level when debug logging is on"""
        if self.is_debug_enabled():
            logger.debug(f"Frontend environment configuration: {self.get_all()}")
