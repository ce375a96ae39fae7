"""
User-facing notifications produced by company mutations.

A ``Notifier`` collects transient messages for the caller to display and
forwards each one to an optional sink (for example a websocket push or a UI
toast queue).
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = DEFAULT


class Notifier:
    def __init__(self, sink: Optional[Callable[[Notification], None]] = None):
        self._sink = sink
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)
        logger.debug("Notification [%s] %s: %s", notification.variant, notification.title, notification.description)
        if self._sink is not None:
            self._sink(notification)

    def success(self, title: str, description: str) -> None:
        self.notify(Notification(title, description))

    def error(self, title: str, description: str) -> None:
        self.notify(Notification(title, description, DESTRUCTIVE))

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()
