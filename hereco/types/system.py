"""Type definitions for storage, cache, health and connection status"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Literal, Optional

from .envelope import ApiResponse


class ContainerInfoResponse(ApiResponse):
    data: Optional[Dict[str, Any]] = None


class CacheStatsResponse(ApiResponse):
    data: Optional[Dict[str, Any]] = None


class HealthResponse(ApiResponse):
    status: Optional[str] = None


class ConnectionStatus(BaseModel):
    """Last observed state of the backend connection"""

    model_config = ConfigDict(populate_by_name=True)

    tested: bool = False
    valid: bool = False
    backend_url: str = Field("", alias="backendUrl")
    cors_enabled: bool = Field(True, alias="corsEnabled")
    cross_origin: bool = Field(False, alias="crossOrigin")


class ConnectionTestResult(BaseModel):
    """Outcome of ``test_backend_connection``"""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    type: Optional[Literal["configuration", "cors", "network"]] = None
    health: Optional[HealthResponse] = None
