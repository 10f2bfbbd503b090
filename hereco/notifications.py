"""Toast notifications and the configuration warning banner"""

import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, List, Optional

from pydantic import BaseModel

from .exceptions import HerecoError, USER_MESSAGES, ErrorCategory

logger = logging.getLogger(__name__)

MAX_VISIBLE = 5


class NotificationLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    message: str
    level: NotificationLevel = NotificationLevel.INFO
    detail: Optional[str] = None


class Notifier:
    """
    Collects the notifications shown to the user.

    Only the most recent five stay visible. Raw error detail is attached only
    when detailed errors are enabled; it is always written to the log.
    """

    def __init__(self, detailed_errors: bool = False):
        self.detailed_errors = detailed_errors
        self._visible: Deque[Notification] = deque(maxlen=MAX_VISIBLE)
        self._banner: Optional[Notification] = None
        self._listeners: List[Callable[[Notification], None]] = []

    @property
    def visible(self) -> List[Notification]:
        return list(self._visible)

    @property
    def banner(self) -> Optional[Notification]:
        return self._banner

    def on_notify(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO, detail: Optional[str] = None) -> Notification:
        notification = Notification(message=message, level=level, detail=detail)
        self._visible.append(notification)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def notify_error(self, error: Exception, message: Optional[str] = None) -> Notification:
        """
        Show a short message for an error

        Args:
            error: The failure; HerecoError supplies its own user message
            message: Overrides the derived user message
        """
        logger.error(f"{type(error).__name__}: {error}")
        if message is None:
            if isinstance(error, HerecoError):
                message = error.user_message
            else:
                message = USER_MESSAGES[ErrorCategory.UNKNOWN]
        detail = str(error) if self.detailed_errors else None
        return self.notify(message, NotificationLevel.ERROR, detail)

    def show_banner(self, message: str, level: NotificationLevel = NotificationLevel.WARNING) -> None:
        """Persistent banner, e.g. for a missing backend configuration"""
        logger.warning(f"Banner: {message}")
        self._banner = Notification(message=message, level=level)

    def dismiss_banner(self) -> None:
        self._banner = None

    def clear(self) -> None:
        self._visible.clear()
