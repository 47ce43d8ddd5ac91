"""User-visible notifications (the toasts of the web client)."""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

SESSION_EXPIRED = "Session expired. Please login again."
NETWORK_ERROR = "Network error. Please check your connection."
UNEXPECTED_ERROR = "An unexpected error occurred."
GENERIC_ERROR = "An error occurred"


class Level(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: Level
    message: str


class Notifier:
    """Collects notifications and logs them.

    Front ends subclass this (or read ``history``) to display them.
    """

    def __init__(self) -> None:
        self._history: list[Notification] = []

    @property
    def history(self) -> list[Notification]:
        """Get notifications emitted so far, oldest first."""
        return self._history.copy()

    def success(self, message: str) -> None:
        self._emit(Notification(Level.SUCCESS, message))

    def error(self, message: str) -> None:
        self._emit(Notification(Level.ERROR, message))

    def clear(self) -> None:
        self._history = []

    def _emit(self, notification: Notification) -> None:
        self._history.append(notification)
        if notification.level is Level.ERROR:
            logger.warning("notify error: %s", notification.message)
        else:
            logger.info("notify success: %s", notification.message)
