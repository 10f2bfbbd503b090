"""Type definitions for the hereco client"""

from .envelope import ApiResponse
from .podcast import Enclosure, Episode, EpisodeListResponse, FeedInfo, FeedInfoResponse
from .files import (
    FileItem,
    Pagination,
    FileListResponse,
    FileInfoResponse,
    DownloadUrl,
    DownloadUrlResponse,
)
from .system import (
    ContainerInfoResponse,
    CacheStatsResponse,
    HealthResponse,
    ConnectionStatus,
    ConnectionTestResult,
)
from .chat import (
    MessageRole,
    ChatMessage,
    ChatSession,
    CompletionMessage,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatHistoryResponse,
    ChatbotModelsResponse,
    ChatbotStatusResponse,
)
from .admin import (
    ModelConfig,
    ModelConfigResponse,
    ServiceStatusResponse,
    ModelTestResponse,
    AdminUser,
    AdminUserListResponse,
    AdminHealthResponse,
)

__all__ = [
    "ApiResponse",
    "Enclosure",
    "Episode",
    "EpisodeListResponse",
    "FeedInfo",
    "FeedInfoResponse",
    "FileItem",
    "Pagination",
    "FileListResponse",
    "FileInfoResponse",
    "DownloadUrl",
    "DownloadUrlResponse",
    "ContainerInfoResponse",
    "CacheStatsResponse",
    "HealthResponse",
    "ConnectionStatus",
    "ConnectionTestResult",
    "MessageRole",
    "ChatMessage",
    "ChatSession",
    "CompletionMessage",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "ChatHistoryResponse",
    "ChatbotModelsResponse",
    "ChatbotStatusResponse",
    "ModelConfig",
    "ModelConfigResponse",
    "ServiceStatusResponse",
    "ModelTestResponse",
    "AdminUser",
    "AdminUserListResponse",
    "AdminHealthResponse",
]
