"""
Unit tests for AuthStateBridge

Tests:
- Single provider subscription
- Navigation chrome for signed-in and signed-out users
- Listener fan-out and async event streams
- Token retrieval and sign-out
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, Mock

from hereco.auth import (
    AuthEvent,
    AuthStateBridge,
    AuthUser,
    NavigationChrome,
    UnavailableAuthProvider,
)


@pytest.mark.unit
class TestNavigationChrome:
    """Test suite for NavigationChrome.for_user"""

    def test_signed_out(self):
        chrome = NavigationChrome.for_user(None)

        assert chrome.show_auth_links is True
        assert chrome.display_name is None

    def test_display_name_and_photo(self):
        user = AuthUser(uid="u1", email="ada@example.com", display_name="Ada", photo_url="https://img/ada.png")

        chrome = NavigationChrome.for_user(user)

        assert chrome.show_auth_links is False
        assert chrome.display_name == "Ada"
        assert chrome.avatar_url == "https://img/ada.png"

    def test_falls_back_to_email_local_part(self):
        user = AuthUser(uid="u1", email="grace@example.com")

        chrome = NavigationChrome.for_user(user)

        assert chrome.display_name == "grace"
        assert chrome.avatar_url.endswith("text=G")

    def test_falls_back_to_user(self):
        chrome = NavigationChrome.for_user(AuthUser(uid="u1"))

        assert chrome.display_name == "User"


@pytest.mark.unit
class TestAuthStateBridge:
    """Test suite for AuthStateBridge"""

    def test_start_reports_initial_user(self, bridge, user):
        assert bridge.current_user == user
        assert bridge.chrome.display_name == "Ada Lovelace"

    def test_subscribes_once(self, auth_provider):
        """Any number of listeners share one provider subscription"""
        bridge = AuthStateBridge(auth_provider)
        bridge.start()
        bridge.start()
        bridge.subscribe(Mock())
        bridge.subscribe(Mock())

        assert auth_provider.subscriber_count == 1

    def test_stop_unsubscribes(self, auth_provider):
        bridge = AuthStateBridge(auth_provider)
        bridge.start()
        bridge.stop()

        assert auth_provider.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_listeners_receive_transitions(self, bridge, auth_provider, user):
        listener = Mock()
        bridge.subscribe(listener)

        await auth_provider.sign_out()

        event = listener.call_args[0][0]
        assert isinstance(event, AuthEvent)
        assert event.user is None
        assert event.previous == user
        assert event.signed_in is False
        assert bridge.chrome.show_auth_links is True

    def test_unsubscribed_listener_not_called(self, bridge, auth_provider):
        listener = Mock()
        unsubscribe = bridge.subscribe(listener)
        unsubscribe()

        auth_provider.sign_in(AuthUser(uid="u2"))

        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self, bridge, auth_provider):
        bridge.subscribe(Mock(side_effect=RuntimeError("boom")))
        second = Mock()
        bridge.subscribe(second)

        auth_provider.sign_in(AuthUser(uid="u2"))

        second.assert_called_once()

    @pytest.mark.asyncio
    async def test_every_stream_sees_every_event(self, bridge, auth_provider):
        """Independent consumers each receive each transition"""
        received = {"a": [], "b": []}

        async def consume(name):
            async for event in bridge.events():
                received[name].append(event.user.uid if event.user else None)
                if len(received[name]) == 2:
                    break

        tasks = [asyncio.create_task(consume("a")), asyncio.create_task(consume("b"))]
        await asyncio.sleep(0)

        await auth_provider.sign_out()
        auth_provider.sign_in(AuthUser(uid="u2"))

        await asyncio.wait_for(asyncio.gather(*tasks), timeout=1)
        assert received == {"a": [None, "u2"], "b": [None, "u2"]}

    @pytest.mark.asyncio
    async def test_get_id_token(self, bridge):
        assert await bridge.get_id_token() == "local-token:user-1"

    @pytest.mark.asyncio
    async def test_get_id_token_signed_out(self, bridge, auth_provider):
        await bridge.sign_out()

        assert await bridge.get_id_token() is None

    @pytest.mark.asyncio
    async def test_get_id_token_failure_returns_none(self, bridge, auth_provider):
        auth_provider.get_id_token = AsyncMock(side_effect=RuntimeError("expired"))

        assert await bridge.get_id_token() is None


@pytest.mark.unit
class TestUnavailableProvider:
    """Test suite for running without an authentication service"""

    @pytest.mark.asyncio
    async def test_bridge_without_provider(self):
        bridge = AuthStateBridge()
        bridge.start()

        assert isinstance(bridge.provider, UnavailableAuthProvider)
        assert bridge.available is False
        assert bridge.current_user is None
        assert await bridge.get_id_token() is None
        await bridge.sign_out()
