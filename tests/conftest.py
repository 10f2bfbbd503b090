"""
Pytest configuration and shared fixtures for hereco tests

Provides:
- Sync and async clients pointed at a fake backend (single attempt, no delay)
- Page locations and in-memory local storage
- A local authentication provider with a signed-in test user
- Sample backend payloads
"""

import pytest

from hereco import AsyncClient, Client
from hereco.auth import AuthStateBridge, AuthUser, LocalAuthProvider
from hereco.page import PageLocation
from hereco.storage import MemoryStorage


@pytest.fixture
def base_url():
    """Test backend URL"""
    return "http://api.hereco.test"


@pytest.fixture
def client(base_url):
    """Create test client"""
    client = Client(base_url=base_url, max_retries=1, retry_delay=0)
    yield client
    client.close()


@pytest.fixture
def async_client(base_url):
    """Create test async client"""
    return AsyncClient(base_url=base_url, max_retries=1, retry_delay=0)


@pytest.fixture
def page():
    """Production page with no query parameters"""
    return PageLocation("https://hereco.example/chatbot.html")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def user():
    return AuthUser(uid="user-1", email="ada@example.com", display_name="Ada Lovelace")


@pytest.fixture
def auth_provider(user):
    """Local provider with the test user already signed in"""
    return LocalAuthProvider(user=user)


@pytest.fixture
def bridge(auth_provider):
    """Started auth bridge following the local provider"""
    bridge = AuthStateBridge(auth_provider)
    bridge.start()
    yield bridge
    bridge.stop()


@pytest.fixture
def mock_episode():
    """Episode as returned by /api/podcast/episodes"""
    return {
        "title": "Episode 12: Field Recordings",
        "description": "<p>We talk about <b>field recordings</b>.</p>",
        "link": "https://hereco.example/episodes/12",
        "pubDate": "Fri, 05 Jan 2024 15:04:00 GMT",
        "duration": "42:10",
        "image": "https://cdn.hereco.example/12.jpg",
        "enclosure": {"url": "https://cdn.hereco.example/12.mp3", "type": "audio/mpeg", "length": 1024},
    }


@pytest.fixture
def mock_file():
    """File as returned by /api/files"""
    return {
        "name": "cover.png",
        "size": 1536,
        "contentType": "image/png",
        "lastModified": "2024-01-05T15:04:00Z",
        "url": "https://cdn.hereco.example/cover.png",
    }
