"""Unit tests for PageLocation, local storage backends and the response cache"""

import pytest

from hereco._cache import ResponseCache
from hereco.page import PageLocation
from hereco.storage import FileStorage, MemoryStorage


@pytest.mark.unit
class TestPageLocation:
    """Test suite for PageLocation"""

    def test_origin_and_params(self):
        page = PageLocation("http://localhost:8080/chatbot.html?c=abc&env=A=1&env=B=2")

        assert page.origin == "http://localhost:8080"
        assert page.hostname == "localhost"
        assert page.get_param("c") == "abc"
        assert page.get_all_params("env") == ["A=1", "B=2"]
        assert page.get_param("missing") is None

    def test_set_param_pushes_history(self, page):
        page.set_param("c", "abc")

        assert page.href == "https://hereco.example/chatbot.html?c=abc"
        assert page.can_go_back() is True

    def test_unchanged_url_not_pushed(self, page):
        page.delete_param("c")

        assert page.can_go_back() is False

    def test_back_and_forward_fire_popstate(self, page):
        seen = []
        page.on_popstate(lambda p: seen.append(p.get_param("c")))
        page.set_param("c", "a")
        page.set_param("c", "b")

        assert page.back() is True
        assert page.forward() is True
        assert page.forward() is False
        assert seen == ["a", "b"]

    def test_push_truncates_forward_entries(self, page):
        page.set_param("c", "a")
        page.back()
        page.set_param("c", "b")

        assert page.can_go_forward() is False

    def test_popstate_unsubscribe(self, page):
        seen = []
        unsubscribe = page.on_popstate(seen.append)
        unsubscribe()
        page.set_param("c", "a")
        page.back()

        assert seen == []


@pytest.mark.unit
class TestStorage:
    """Test suite for local storage backends"""

    def test_memory_json(self):
        storage = MemoryStorage()
        storage.set_json("key", {"a": 1})

        assert storage.get_json("key") == {"a": 1}
        assert storage.keys() == ["key"]

    def test_corrupt_json_returns_default(self):
        storage = MemoryStorage({"key": "{not json"})

        assert storage.get_json("key", []) == []

    def test_remove_missing_key(self):
        storage = MemoryStorage()
        storage.remove_item("missing")

        assert storage.get_item("missing") is None

    def test_file_storage_persists(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        FileStorage(str(path)).set_json("chatbot-chats-u1", [{"id": "a"}])

        reopened = FileStorage(str(path))

        assert reopened.get_json("chatbot-chats-u1") == [{"id": "a"}]
        reopened.remove_item("chatbot-chats-u1")
        assert reopened.keys() == []

    def test_file_storage_unreadable_file(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("garbage")

        assert FileStorage(str(path)).get_item("key") is None


@pytest.mark.unit
class TestResponseCache:
    """Test suite for ResponseCache"""

    def test_set_and_get(self):
        cache = ResponseCache()
        cache.set("episodes", [1])

        assert cache.get("episodes") == [1]

    def test_expired_entry(self, monkeypatch):
        clock = [100.0]
        monkeypatch.setattr("hereco._cache.time.monotonic", lambda: clock[0])
        cache = ResponseCache(ttl_seconds=10)
        cache.set("episodes", [1])

        clock[0] = 110.0

        assert cache.get("episodes") is None
        assert len(cache) == 0

    def test_oldest_entry_evicted(self):
        cache = ResponseCache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert cache.get("a") is None
        assert cache.get("c") == 3

    def test_disabled(self):
        cache = ResponseCache(enabled=False)
        cache.set("a", 1)

        assert cache.get("a") is None

    def test_make_key_ignores_option_order(self):
        assert ResponseCache.make_key("episodes") == "episodes"
        assert ResponseCache.make_key("files", {"page": 1, "limit": 12}) == ResponseCache.make_key(
            "files", {"limit": 12, "page": 1}
        )

    def test_clear_single_key(self):
        cache = ResponseCache()
        cache.set("a", 1)
        cache.set("b", 2)

        cache.clear("a")

        assert len(cache) == 1
