# helpdesk/core/notifications.py
"""User facing notifications (the toast surface of the web client).

Every create or fetch outcome produces exactly one notification. The service
does not render them; it logs them and hands them back in the response body.
"""
import logging
from enum import Enum
from typing import Callable

from pydantic import BaseModel

log = logging.getLogger(__name__)


class Variant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notification(BaseModel):
    title: str
    description: str
    variant: Variant = Variant.DEFAULT

    @classmethod
    def success(cls, description: str) -> "Notification":
        return cls(title="Success", description=description)

    @classmethod
    def error(cls, description: str) -> "Notification":
        return cls(title="Error", description=description, variant=Variant.DESTRUCTIVE)


Notifier = Callable[[Notification], None]


def log_notification(notification: Notification) -> None:
    level = logging.WARNING if notification.variant is Variant.DESTRUCTIVE else logging.INFO
    log.log(level, "%s: %s", notification.title, notification.description)


class NotificationCollector:
    """Notifier that keeps what it was sent, so a route can return it."""

    def __init__(self, forward: Notifier | None = log_notification):
        self.sent: list[Notification] = []
        self._forward = forward

    def __call__(self, notification: Notification) -> None:
        self.sent.append(notification)
        if self._forward is not None:
            self._forward(notification)

    @property
    def last(self) -> Notification | None:
        return self.sent[-1] if self.sent else None


__all__ = ["Notification", "NotificationCollector", "Notifier", "Variant", "log_notification"]
