"""Type definitions for chat sessions and the chatbot API"""

import secrets
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 50
DEFAULT_TITLE = "New Chat"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_id() -> str:
    """Random URL-safe token used as a chat session id"""
    return secrets.token_urlsafe(12)


class MessageRole(str, Enum):
    """Message roles"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Single chat message; immutable once created"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=_now)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_shape(cls, data: Any) -> Any:
        # Older pages stored {"type": "user", "id": 1712345678901.42}
        if isinstance(data, dict) and "role" not in data and "type" in data:
            data = {**data, "role": data["type"]}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value


class ChatSession(BaseModel):
    """A chat conversation owned by one user"""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str
    title: str = DEFAULT_TITLE
    messages: List[ChatMessage] = Field(default_factory=list)
    owner_user_id: str = ""
    updated_at: datetime = Field(default_factory=_now)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_shape(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "userId" in data and "ownerUserId" not in data:
                data["ownerUserId"] = data.pop("userId")
            if "timestamp" in data and "updatedAt" not in data:
                data["updatedAt"] = data.pop("timestamp")
        return data

    def to_storage(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys"""
        return self.model_dump(mode="json", by_alias=True)


def make_title(messages: List[ChatMessage]) -> str:
    """First user message, truncated to 50 characters"""
    for message in messages:
        if message.role == MessageRole.USER:
            content = message.content
            if len(content) > TITLE_MAX_LENGTH:
                return content[:TITLE_MAX_LENGTH] + "..."
            return content
    return DEFAULT_TITLE


class CompletionMessage(BaseModel):
    """Conversation turn sent to the chatbot backend"""
    role: MessageRole
    content: str


class ChatCompletionRequest(BaseModel):
    """Request body for the chatbot inference endpoint"""
    model: str
    messages: List[CompletionMessage]
    max_tokens: int = Field(default=1000, ge=1, le=8192)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class ChatCompletionResponse(BaseModel):
    """Chatbot reply; ``response`` holds the assistant text"""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    response: Optional[str] = None
    error: Optional[str] = None
    model: Optional[str] = None


class ChatHistoryResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    chats: List[ChatSession] = Field(default_factory=list)


class ChatbotModelsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = True
    models: List[Any] = Field(default_factory=list)
    default_model: Optional[str] = None


class ChatbotStatusResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = True
    status: Optional[str] = None
    model: Optional[str] = None
