from __future__ import annotations
from dataclasses import dataclass
import logging

from PySide6.QtCore import QObject, Signal

from core.errors import AppError

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    notify_type: str = "info"   # info/success/warning/error

class AppState(QObject):
    """
    Process-wide handles plus the single pending notification slot.
    A new notification replaces an unacknowledged one; nothing is queued.
    """
    notification_changed = Signal(object)   # Notification | None

    def __init__(self, config=None):
        super().__init__()
        self.config = config
        self.db = None
        self.backend = None
        self.player = None
        self.pending_notification: Notification | None = None

    def notify(self, title: str, message: str, notify_type: str = "info") -> None:
        self.pending_notification = Notification(title=title, message=message, notify_type=notify_type)
        self.notification_changed.emit(self.pending_notification)

    def notify_error(self, error: AppError) -> None:
        logger.warning("%s: %s", error.kind.value, error.message)
        self.notify(error.title, error.message, "error")

    def dismiss_notification(self) -> None:
        if self.pending_notification is None:
            return
        self.pending_notification = None
        self.notification_changed.emit(None)
