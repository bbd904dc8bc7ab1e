"""
Notification Service.

Fire-and-forget success/error messages raised by screens (the toast surface).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Protocol

logger = logging.getLogger("backoffice.notifications")


class NotificationType(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass
class Notification:
    type: NotificationType
    message: str
    created_at: datetime = field(default_factory=datetime.now)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class NotificationCenter:
    """Keeps every notification shown during the session and logs it."""

    def __init__(self):
        self.history: List[Notification] = []

    def success(self, message: str) -> None:
        self._push(NotificationType.SUCCESS, message)
        logger.info(message)

    def error(self, message: str) -> None:
        self._push(NotificationType.ERROR, message)
        logger.warning(message)

    def _push(self, type: NotificationType, message: str) -> None:
        self.history.append(Notification(type=type, message=message))

    @property
    def errors(self) -> List[str]:
        return [n.message for n in self.history if n.type == NotificationType.ERROR]

    @property
    def successes(self) -> List[str]:
        return [n.message for n in self.history if n.type == NotificationType.SUCCESS]

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()
