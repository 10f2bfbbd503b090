"""Podcast resource implementation"""

from typing import Any, TYPE_CHECKING

from .._cache import ResponseCache
from ..types.envelope import ApiResponse
from ..types.podcast import EpisodeListResponse, FeedInfoResponse

if TYPE_CHECKING:
    from ..client import Client
    from ..async_client import AsyncClient


class PodcastResource:
    """Synchronous Podcast resource"""

    def __init__(self, client: "Client"):
        self._client = client

    def episodes(self, **options: Any) -> EpisodeListResponse:
        """
        List podcast episodes.

        Results are served from the response cache when fresh.

        Args:
            **options: Query parameters (limit, search, ...)

        Returns:
            EpisodeListResponse: Episodes parsed from the RSS feed
        """
        key = ResponseCache.make_key("episodes", options)
        cached = self._client.response_cache.get(key)
        if cached is not None:
            return cached

        response = self._client.request("GET", "/api/podcast/episodes", params=options)
        result = EpisodeListResponse(**response.json())
        self._client.response_cache.set(key, result)
        return result

    def feed_info(self) -> FeedInfoResponse:
        """Channel metadata of the podcast feed (cached)"""
        cached = self._client.response_cache.get("feed_info")
        if cached is not None:
            return cached

        response = self._client.request("GET", "/api/podcast/feed-info")
        result = FeedInfoResponse(**response.json())
        self._client.response_cache.set("feed_info", result)
        return result

    def feed(self) -> ApiResponse:
        """Complete feed: channel metadata plus every episode (cached)"""
        cached = self._client.response_cache.get("complete_feed")
        if cached is not None:
            return cached

        response = self._client.request("GET", "/api/podcast/feed")
        result = ApiResponse(**response.json())
        self._client.response_cache.set("complete_feed", result)
        return result

    def search_episodes(self, query: str, **options: Any) -> EpisodeListResponse:
        """
        Search episodes by text.

        Args:
            query: Search text
            **options: Additional query parameters

        Returns:
            EpisodeListResponse: Matching episodes
        """
        return self.episodes(**{**options, "search": query})


class AsyncPodcastResource:
    """Asynchronous Podcast resource"""

    def __init__(self, client: "AsyncClient"):
        self._client = client

    async def episodes(self, **options: Any) -> EpisodeListResponse:
        """List podcast episodes (cached per query)"""
        key = ResponseCache.make_key("episodes", options)
        cached = self._client.response_cache.get(key)
        if cached is not None:
            return cached

        response = await self._client.request("GET", "/api/podcast/episodes", params=options)
        result = EpisodeListResponse(**response.json())
        self._client.response_cache.set(key, result)
        return result

    async def feed_info(self) -> FeedInfoResponse:
        """Channel metadata of the podcast feed (cached)"""
        cached = self._client.response_cache.get("feed_info")
        if cached is not None:
            return cached

        response = await self._client.request("GET", "/api/podcast/feed-info")
        result = FeedInfoResponse(**response.json())
        self._client.response_cache.set("feed_info", result)
        return result

    async def feed(self) -> ApiResponse:
        """Complete feed (cached)"""
        cached = self._client.response_cache.get("complete_feed")
        if cached is not None:
            return cached

        response = await self._client.request("GET", "/api/podcast/feed")
        result = ApiResponse(**response.json())
        self._client.response_cache.set("complete_feed", result)
        return result

    async def search_episodes(self, query: str, **options: Any) -> EpisodeListResponse:
        """Search episodes by text"""
        return await self.episodes(**{**options, "search": query})
