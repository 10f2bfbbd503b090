"""Storage resource implementation"""

from typing import TYPE_CHECKING

from ..types.envelope import ApiResponse
from ..types.system import ContainerInfoResponse

if TYPE_CHECKING:
    from ..client import Client
    from ..async_client import AsyncClient


class StorageResource:
    """Synchronous Storage resource"""

    def __init__(self, client: "Client"):
        self._client = client

    def container_info(self) -> ContainerInfoResponse:
        """Blob container metadata (cached)"""
        cached = self._client.response_cache.get("container_info")
        if cached is not None:
            return cached

        response = self._client.request("GET", "/api/storage/container-info")
        result = ContainerInfoResponse(**response.json())
        self._client.response_cache.set("container_info", result)
        return result

    def test_connection(self) -> ApiResponse:
        """Ask the backend to test its blob storage connection"""
        response = self._client.request("GET", "/api/storage/test-connection")
        return ApiResponse(**response.json())


class AsyncStorageResource:
    """Asynchronous Storage resource"""

    def __init__(self, client: "AsyncClient"):
        self._client = client

    async def container_info(self) -> ContainerInfoResponse:
        cached = self._client.response_cache.get("container_info")
        if cached is not None:
            return cached

        response = await self._client.request("GET", "/api/storage/container-info")
        result = ContainerInfoResponse(**response.json())
        self._client.response_cache.set("container_info", result)
        return result

    async def test_connection(self) -> ApiResponse:
        response = await self._client.request("GET", "/api/storage/test-connection")
        return ApiResponse(**response.json())
