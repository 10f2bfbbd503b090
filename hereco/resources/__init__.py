"""Resource classes for the hereco client"""

from .podcast import PodcastResource, AsyncPodcastResource
from .files import FilesResource, AsyncFilesResource
from .storage import StorageResource, AsyncStorageResource
from .cache import CacheResource, AsyncCacheResource
from .health import HealthResource, AsyncHealthResource
from .chatbot import ChatbotResource, AsyncChatbotResource
from .admin import AdminResource, AsyncAdminResource

__all__ = [
    "PodcastResource",
    "AsyncPodcastResource",
    "FilesResource",
    "AsyncFilesResource",
    "StorageResource",
    "AsyncStorageResource",
    "CacheResource",
    "AsyncCacheResource",
    "HealthResource",
    "AsyncHealthResource",
    "ChatbotResource",
    "AsyncChatbotResource",
    "AdminResource",
    "AsyncAdminResource",
]
