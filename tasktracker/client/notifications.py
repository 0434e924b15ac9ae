"""Transient user-facing messages.

Each notification lives for a fixed time-to-live and then drops out of
``Notifier.active()``. Listeners see every notification as it is pushed.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, List, Optional

from ..config import NOTIFICATION_TTL_SECONDS

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass
class Notification:
    message: str
    severity: Severity = Severity.INFO
    created_at: datetime = field(default_factory=_utcnow)
    ttl: timedelta = field(default_factory=lambda: timedelta(seconds=NOTIFICATION_TTL_SECONDS))

    @property
    def expires_at(self) -> datetime:
        return self.created_at + self.ttl

    def expired(self, now: Optional[datetime] = None) -> bool:
        return (now or _utcnow()) >= self.expires_at


Listener = Callable[[Notification], None]


class Notifier:
    """Collects notifications and fans them out to listeners."""

    def __init__(self, ttl_seconds: float = NOTIFICATION_TTL_SECONDS, clock: Callable[[], datetime] = _utcnow):
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._active: List[Notification] = []
        self._listeners: List[Listener] = []
        # Reminder scans push from a background thread.
        self._lock = threading.Lock()
        self.history: List[Notification] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def push(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        notification = Notification(message, Severity(severity), self._clock(), self._ttl)
        with self._lock:
            self._active.append(notification)
            self.history.append(notification)
        logger.log(_LOG_LEVELS[notification.severity], "[%s] %s", notification.severity.value, message)
        for listener in self._listeners:
            listener(notification)
        return notification

    def active(self, now: Optional[datetime] = None) -> List[Notification]:
        """Return live notifications, dismissing the expired ones."""
        now = now or self._clock()
        with self._lock:
            self._active = [n for n in self._active if not n.expired(now)]
            return list(self._active)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        with self._lock:
            self._active.clear()
            self.history.clear()
