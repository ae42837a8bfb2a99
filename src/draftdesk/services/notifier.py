"""User-facing notifications raised by editor actions."""

from typing import Callable, Optional, Protocol

from draftdesk.models.notification import Notification
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class RecordingNotifier:
    """
    Default notifier: logs every notification and keeps a history.

    A UI layer can pass ``on_notify`` to render toasts as they arrive.
    """

    def __init__(self, on_notify: Optional[Callable[[Notification], None]] = None):
        self.history: list[Notification] = []
        self._on_notify = on_notify

    def notify(self, notification: Notification) -> None:
        self.history.append(notification)
        logger.info(
            "user_notification",
            level=notification.level,
            title=notification.title,
            field=notification.field,
        )
        if self._on_notify is not None:
            self._on_notify(notification)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()
