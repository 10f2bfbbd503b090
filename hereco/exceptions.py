"""Exception classes and user-facing error messages for the hereco client"""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """Coarse error categories, one per user-facing message"""
    CONFIGURATION = "configuration"
    TIMEOUT = "timeout"
    NETWORK = "network"
    CONNECTION = "connection"
    CORS = "cors"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    SERVER = "server"
    UNKNOWN = "unknown"


USER_MESSAGES = {
    ErrorCategory.CONFIGURATION: "Backend API URL not configured. Please update BACKEND_API_URL in your environment configuration.",
    ErrorCategory.TIMEOUT: "Request timed out. Please try again.",
    ErrorCategory.NETWORK: "Network error. Please check your internet connection and try again.",
    ErrorCategory.CONNECTION: "Unable to connect to the server. Please check your connection.",
    ErrorCategory.CORS: "CORS configuration issue. The backend server needs to allow requests from this domain.",
    ErrorCategory.UNAUTHORIZED: "Unauthorized access. Please refresh the page.",
    ErrorCategory.FORBIDDEN: "Access forbidden. Please contact administrator.",
    ErrorCategory.NOT_FOUND: "Resource not found.",
    ErrorCategory.VALIDATION: "The request was rejected. Please check your input.",
    ErrorCategory.RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    ErrorCategory.SERVER: "Server error occurred. Please try again later.",
    ErrorCategory.UNKNOWN: "An error occurred. Please try again.",
}


class HerecoError(Exception):
    """Base exception for all hereco client errors"""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        """Short, non-technical message suitable for a notification toast"""
        return USER_MESSAGES[self.category]


class ConfigurationError(HerecoError):
    """Raised when the backend URL is missing or malformed"""
    category = ErrorCategory.CONFIGURATION


class RequestTimeoutError(HerecoError):
    """Raised when a request exceeds the configured timeout"""
    category = ErrorCategory.TIMEOUT


class NetworkError(HerecoError):
    """Raised for transport failures (DNS, refused connection, reset)"""
    category = ErrorCategory.CONNECTION


class CorsError(HerecoError):
    """Raised when a cross-origin request is rejected; never retried"""
    category = ErrorCategory.CORS


class APIError(HerecoError):
    """Raised for unexpected HTTP status codes"""
    pass


class AuthenticationError(APIError):
    """Raised when the bearer token is invalid or missing (401)"""
    category = ErrorCategory.UNAUTHORIZED


class PermissionError(APIError):
    """Raised when user lacks permission for resource (403)"""
    category = ErrorCategory.FORBIDDEN


class NotFoundError(APIError):
    """Raised when resource is not found (404)"""
    category = ErrorCategory.NOT_FOUND


class ValidationError(APIError):
    """Raised when request validation fails (422)"""
    category = ErrorCategory.VALIDATION


class RateLimitError(APIError):
    """Raised when rate limit is exceeded (429)"""
    category = ErrorCategory.RATE_LIMITED


class ServerError(APIError):
    """Raised for 5xx responses; retried by the client"""
    category = ErrorCategory.SERVER


class ChatError(HerecoError):
    """Raised when the chatbot backend answers without a usable reply"""
    category = ErrorCategory.SERVER
