"""Backend cache management resource implementation"""

from typing import Optional, TYPE_CHECKING

from ..types.envelope import ApiResponse
from ..types.system import CacheStatsResponse

if TYPE_CHECKING:
    from ..client import Client
    from ..async_client import AsyncClient


def _clear_body(service: Optional[str], filename: Optional[str]) -> dict:
    body = {}
    if service:
        body["service"] = service
    if filename:
        body["filename"] = filename
    return body


class CacheResource:
    """Synchronous Cache resource"""

    def __init__(self, client: "Client"):
        self._client = client

    def stats(self) -> CacheStatsResponse:
        """Backend cache statistics"""
        response = self._client.request("GET", "/api/cache/stats")
        return CacheStatsResponse(**response.json())

    def clear(self, service: Optional[str] = None, filename: Optional[str] = None) -> ApiResponse:
        """
        Clear backend caches, then the local response cache.

        Args:
            service: Limit clearing to one backend service (e.g. "azure")
            filename: Limit clearing to one file of that service

        Returns:
            ApiResponse: Backend confirmation
        """
        response = self._client.request("POST", "/api/cache/clear", json=_clear_body(service, filename))
        self._client.response_cache.clear()
        return ApiResponse(**response.json())


class AsyncCacheResource:
    """Asynchronous Cache resource"""

    def __init__(self, client: "AsyncClient"):
        self._client = client

    async def stats(self) -> CacheStatsResponse:
        response = await self._client.request("GET", "/api/cache/stats")
        return CacheStatsResponse(**response.json())

    async def clear(self, service: Optional[str] = None, filename: Optional[str] = None) -> ApiResponse:
        """Clear backend caches, then the local response cache"""
        response = await self._client.request("POST", "/api/cache/clear", json=_clear_body(service, filename))
        self._client.response_cache.clear()
        return ApiResponse(**response.json())
