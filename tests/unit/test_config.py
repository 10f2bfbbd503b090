"""
Unit tests for EnvironmentResolver

Tests:
- Source precedence (defaults, build time, meta tags, URL, local overrides)
- Environment detection from the hostname
- Production policy for debug flags
- Typed getters and backend URL validation
"""

import pytest

from hereco.config import (
    ConfigSource,
    EnvironmentResolver,
    LOCAL_OVERRIDES_KEY,
    check_backend_url,
    detect_environment,
    parse_meta_tags,
)
from hereco.page import PageLocation
from hereco.storage import MemoryStorage


META_HTML = """
<html><head>
  <meta name="env-backend-api-url" content="https://meta.api.example">
  <meta name="env-api-timeout" content="15000">
  <meta name="env-items-per-page" content="">
  <meta name="description" content="not configuration">
</head><body></body></html>
"""


def make_resolver(url, html=None, build_env=None, storage=None):
    return EnvironmentResolver(
        PageLocation(url),
        html=html,
        build_env=build_env if build_env is not None else {},
        storage=storage,
    )


@pytest.mark.unit
class TestSourcePrecedence:
    """Test suite for merging configuration sources"""

    def test_defaults_only(self):
        """Without any source the compiled-in defaults apply"""
        env = make_resolver("https://hereco.example/")

        assert env.api_timeout == 30000
        assert env.api_retry_attempts == 3
        assert env.items_per_page == 12
        assert env.source_of("API_TIMEOUT") == ConfigSource.DEFAULTS

    def test_build_time_overrides_defaults(self):
        env = make_resolver("https://hereco.example/", build_env={"API_TIMEOUT": "5000"})

        assert env.api_timeout == 5000
        assert env.source_of("API_TIMEOUT") == ConfigSource.BUILD_TIME

    def test_meta_overrides_build_time(self):
        env = make_resolver(
            "https://hereco.example/",
            html=META_HTML,
            build_env={"BACKEND_API_URL": "https://build.api.example", "API_TIMEOUT": "5000"},
        )

        assert env.backend_api_url == "https://meta.api.example"
        assert env.api_timeout == 15000

    def test_url_param_overrides_meta(self):
        env = make_resolver(
            "https://hereco.example/?env=BACKEND_API_URL=https://url.api.example",
            html=META_HTML,
        )

        assert env.backend_api_url == "https://url.api.example"
        assert env.source_of("BACKEND_API_URL") == ConfigSource.URL_PARAMS

    def test_local_override_wins_on_localhost(self):
        storage = MemoryStorage()
        storage.set_json(LOCAL_OVERRIDES_KEY, {"BACKEND_API_URL": "http://localhost:9000"})

        env = make_resolver(
            "http://localhost:8080/?env=BACKEND_API_URL=https://url.api.example",
            html=META_HTML,
            storage=storage,
        )

        assert env.backend_api_url == "http://localhost:9000"
        assert env.source_of("BACKEND_API_URL") == ConfigSource.LOCAL_OVERRIDES

    def test_local_override_ignored_on_public_host(self):
        storage = MemoryStorage()
        storage.set_json(LOCAL_OVERRIDES_KEY, {"API_TIMEOUT": "1"})

        env = make_resolver("https://hereco.example/", storage=storage)

        assert env.api_timeout == 30000

    def test_empty_values_are_ignored(self):
        """An empty meta tag does not erase the default"""
        env = make_resolver("https://hereco.example/", html=META_HTML, build_env={"ITEMS_PER_PAGE": ""})

        assert env.items_per_page == 12

    def test_url_value_may_contain_equals(self):
        env = make_resolver("https://hereco.example/?env=BACKEND_API_URL=https://api.example/?a=b")

        assert env.get("BACKEND_API_URL") == "https://api.example/?a=b"

    def test_url_keys_are_upper_cased(self):
        env = make_resolver("https://hereco.example/?env=api_timeout=7000")

        assert env.api_timeout == 7000

    def test_repeated_url_params(self):
        env = make_resolver("https://hereco.example/?env=API_TIMEOUT=7000&env=ITEMS_PER_PAGE=24")

        assert env.api_timeout == 7000
        assert env.items_per_page == 24

    def test_load_is_idempotent(self):
        env = make_resolver("https://hereco.example/")
        first = env.load().get_all()

        assert env.load().get_all() == first


@pytest.mark.unit
class TestEnvironmentDetection:
    """Test suite for hostname-based environment detection"""

    @pytest.mark.parametrize("hostname, expected", [
        ("localhost", "development"),
        ("127.0.0.1", "development"),
        ("staging.hereco.example", "staging"),
        ("preview-42.hereco.example", "staging"),
        ("hereco.example", "production"),
    ])
    def test_detect_environment(self, hostname, expected):
        assert detect_environment(hostname) == expected

    def test_detected_environment_overrides_build_time(self):
        env = make_resolver("https://hereco.example/", build_env={"NODE_ENV": "development"})

        assert env.is_production()

    def test_explicit_url_environment_wins(self):
        env = make_resolver("https://hereco.example/?env=NODE_ENV=staging")

        assert env.is_staging()

    def test_localhost_defaults_to_local_backend(self):
        env = make_resolver("http://localhost:8080/")

        assert env.is_development()
        assert env.backend_api_url == "http://localhost:3000"

    def test_local_dev_mode_redirects_backend(self):
        env = make_resolver(
            "https://hereco.example/",
            build_env={
                "BACKEND_API_URL": "https://api.example",
                "LOCAL_DEV_MODE": "true",
                "LOCAL_BACKEND_URL": "http://127.0.0.1:4000/",
            },
        )

        assert env.backend_api_url == "http://127.0.0.1:4000"


@pytest.mark.unit
class TestProductionPolicy:
    """Test suite for flags forced off in production"""

    def test_debug_flags_forced_off(self):
        env = make_resolver(
            "https://hereco.example/?env=ENABLE_DEBUG_LOGGING=true",
            build_env={"ENABLE_DETAILED_ERRORS": "true", "ENABLE_DEVELOPMENT_TOOLS": "true"},
        )

        assert env.is_debug_enabled() is False
        assert env.is_detailed_errors_enabled() is False
        assert env.are_development_tools_enabled() is False
        assert env.source_of("ENABLE_DEBUG_LOGGING") == ConfigSource.ENVIRONMENT_POLICY

    def test_debug_flags_kept_in_development(self):
        env = make_resolver("http://localhost:8080/?env=ENABLE_DEBUG_LOGGING=true")

        assert env.is_debug_enabled() is True


@pytest.mark.unit
class TestAccessors:
    """Test suite for getters and set()"""

    def test_get_default_for_missing_key(self):
        env = make_resolver("https://hereco.example/")

        assert env.get("NOT_A_KEY") is None
        assert env.get("NOT_A_KEY", "fallback") == "fallback"

    def test_get_bool_invalid_value(self):
        env = make_resolver("https://hereco.example/?env=ENABLE_FRONTEND_CACHING=maybe")

        assert env.is_frontend_caching_enabled() is True

    def test_get_int_invalid_value(self):
        env = make_resolver("https://hereco.example/?env=API_TIMEOUT=soon")

        assert env.api_timeout == 30000

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan", "1e400"])
    def test_get_int_non_finite_value(self, value):
        """Non-finite numbers fall back to the default instead of failing startup"""
        env = make_resolver(f"https://hereco.example/?env=API_TIMEOUT={value}")

        assert env.api_timeout == 30000

    def test_retry_attempts_at_least_one(self):
        env = make_resolver("https://hereco.example/?env=API_RETRY_ATTEMPTS=0")

        assert env.api_retry_attempts == 1

    def test_cors_origins_default_to_page_origin(self):
        env = make_resolver("https://hereco.example/page.html")

        assert env.cors_origins == ["https://hereco.example"]

    def test_set_persists_override_on_localhost(self):
        storage = MemoryStorage()
        env = make_resolver("http://localhost:8080/", storage=storage)

        assert env.set("api_timeout", 1234) is True
        assert env.api_timeout == 1234
        assert storage.get_json(LOCAL_OVERRIDES_KEY) == {"API_TIMEOUT": "1234"}

        reloaded = make_resolver("http://localhost:8080/", storage=storage)
        assert reloaded.api_timeout == 1234

    def test_set_rejected_in_production(self):
        env = make_resolver("https://hereco.example/", storage=MemoryStorage())

        assert env.set("API_TIMEOUT", 1234) is False
        assert env.api_timeout == 30000


@pytest.mark.unit
class TestBackendUrlValidation:
    """Test suite for backend URL checks"""

    def test_page_origin_counts_as_unconfigured(self):
        env = make_resolver("https://hereco.example/")

        result = env.validate_backend_url()

        assert result.valid is False
        assert "not configured" in result.message

    def test_configured_url_is_valid(self):
        env = make_resolver("https://hereco.example/", build_env={"BACKEND_API_URL": "https://api.example"})

        assert env.validate_backend_url().valid is True

    @pytest.mark.parametrize("url", ["", "api.example", "ftp://api.example", "https://"])
    def test_invalid_urls(self, url):
        assert check_backend_url(url).valid is False


@pytest.mark.unit
def test_parse_meta_tags():
    """Meta tag names map to upper-case keys"""
    values = parse_meta_tags(META_HTML)

    assert values == {
        "BACKEND_API_URL": "https://meta.api.example",
        "API_TIMEOUT": "15000",
    }


@pytest.mark.unit
def test_build_time_env_from_dotenv(tmp_path, monkeypatch):
    """pydantic-settings reads the .env file when no mapping is given"""
    monkeypatch.delenv("BACKEND_API_URL", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("BACKEND_API_URL=https://dotenv.api.example\n")

    env = EnvironmentResolver(PageLocation("https://hereco.example/"), env_file=str(env_file))

    assert env.backend_api_url == "https://dotenv.api.example"
