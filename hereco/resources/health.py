"""Health resource implementation"""

from typing import TYPE_CHECKING

from ..types.system import HealthResponse

if TYPE_CHECKING:
    from ..client import Client
    from ..async_client import AsyncClient


class HealthResource:
    """Synchronous Health resource"""

    def __init__(self, client: "Client"):
        self._client = client

    def check(self) -> HealthResponse:
        """Backend health check; never cached"""
        response = self._client.request("GET", "/api/health")
        return HealthResponse(**response.json())


class AsyncHealthResource:
    """Asynchronous Health resource"""

    def __init__(self, client: "AsyncClient"):
        self._client = client

    async def check(self) -> HealthResponse:
        response = await self._client.request("GET", "/api/health")
        return HealthResponse(**response.json())
