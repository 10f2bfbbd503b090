"""Admin resource implementation

Every admin endpoint is authenticated with the ``admin_key`` query parameter
taken from the client (``ADMIN_KEY`` in the environment).
"""

from typing import List, Optional, TYPE_CHECKING

from ..types.admin import (
    ModelConfig,
    ModelConfigResponse,
    ServiceStatusResponse,
    ModelTestResponse,
    AdminUserListResponse,
    AdminHealthResponse,
)
from ..types.envelope import ApiResponse

if TYPE_CHECKING:
    from ..client import Client
    from ..async_client import AsyncClient


class AdminResource:
    """Synchronous Admin resource"""

    def __init__(self, client: "Client"):
        self._client = client

    def _get(self, path: str):
        return self._client.request("GET", path, params=self._client._admin_params())

    def _post(self, path: str, body: dict):
        return self._client.request("POST", path, params=self._client._admin_params(), json=body)

    def model_config(self) -> ModelConfigResponse:
        """Active primary and fallback chatbot models"""
        return ModelConfigResponse(**self._get("/api/admin/model-config").json())

    def update_model_config(self, primary: str, fallback: Optional[List[str]] = None) -> ModelConfigResponse:
        """
        Change the chatbot model configuration.

        Args:
            primary: Model used first
            fallback: Models tried in order when the primary fails

        Returns:
            ModelConfigResponse: The configuration now in effect

        Raises:
            ValueError: If primary is empty or no admin key is configured
        """
        if not primary:
            raise ValueError("primary model is required")
        body = ModelConfig(primary=primary, fallback=fallback or []).model_dump()
        return ModelConfigResponse(**self._post("/api/admin/model-config", body).json())

    def service_status(self) -> ServiceStatusResponse:
        return ServiceStatusResponse(**self._get("/api/admin/service-status").json())

    def test_model(self, model: str, prompt: Optional[str] = None) -> ModelTestResponse:
        """Send a probe prompt to one model and report its latency"""
        body = {"model": model}
        if prompt:
            body["prompt"] = prompt
        return ModelTestResponse(**self._post("/api/admin/test-model", body).json())

    def users(self) -> AdminUserListResponse:
        return AdminUserListResponse(**self._get("/api/admin/users").json())

    def ban_user(self, uid: str, banned: bool = True) -> ApiResponse:
        """Ban (or with banned=False, unban) a user"""
        body = {"uid": uid, "action": "ban" if banned else "unban"}
        return ApiResponse(**self._post("/api/admin/users/ban", body).json())

    def health(self) -> AdminHealthResponse:
        """Per-service health as seen by the backend"""
        return AdminHealthResponse(**self._get("/api/admin/health").json())


class AsyncAdminResource:
    """Asynchronous Admin resource"""

    def __init__(self, client: "AsyncClient"):
        self._client = client

    async def _get(self, path: str):
        return await self._client.request("GET", path, params=self._client._admin_params())

    async def _post(self, path: str, body: dict):
        return await self._client.request("POST", path, params=self._client._admin_params(), json=body)

    async def model_config(self) -> ModelConfigResponse:
        response = await self._get("/api/admin/model-config")
        return ModelConfigResponse(**response.json())

    async def update_model_config(self, primary: str, fallback: Optional[List[str]] = None) -> ModelConfigResponse:
        if not primary:
            raise ValueError("primary model is required")
        body = ModelConfig(primary=primary, fallback=fallback or []).model_dump()
        response = await self._post("/api/admin/model-config", body)
        return ModelConfigResponse(**response.json())

    async def service_status(self) -> ServiceStatusResponse:
        response = await self._get("/api/admin/service-status")
        return ServiceStatusResponse(**response.json())

    async def test_model(self, model: str, prompt: Optional[str] = None) -> ModelTestResponse:
        body = {"model": model}
        if prompt:
            body["prompt"] = prompt
        response = await self._post("/api/admin/test-model", body)
        return ModelTestResponse(**response.json())

    async def users(self) -> AdminUserListResponse:
        response = await self._get("/api/admin/users")
        return AdminUserListResponse(**response.json())

    async def ban_user(self, uid: str, banned: bool = True) -> ApiResponse:
        body = {"uid": uid, "action": "ban" if banned else "unban"}
        response = await self._post("/api/admin/users/ban", body)
        return ApiResponse(**response.json())

    async def health(self) -> AdminHealthResponse:
        response = await self._get("/api/admin/health")
        return AdminHealthResponse(**response.json())
