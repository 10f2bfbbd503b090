"""Type definitions for the admin API"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from .envelope import ApiResponse


class ModelConfig(BaseModel):
    """Primary chatbot model and its ordered fallbacks"""

    model_config = ConfigDict(extra="allow")

    primary: Optional[str] = None
    fallback: List[str] = Field(default_factory=list)


class ModelConfigResponse(ApiResponse):
    config: Optional[ModelConfig] = None


class ServiceStatusResponse(ApiResponse):
    services: Dict[str, Any] = Field(default_factory=dict)


class ModelTestResponse(ApiResponse):
    response: Optional[str] = None
    response_time: Optional[float] = Field(None, alias="responseTime")


class AdminUser(BaseModel):
    """A site user as listed on the admin dashboard"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    is_banned: bool = Field(False, alias="isBanned")
    email_verified: bool = Field(False, alias="emailVerified")
    chat_count: int = Field(0, alias="chatCount")
    last_sign_in: Optional[str] = Field(None, alias="lastSignIn")


class AdminUserListResponse(ApiResponse):
    users: List[AdminUser] = Field(default_factory=list)


class AdminHealthResponse(ApiResponse):
    health: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
