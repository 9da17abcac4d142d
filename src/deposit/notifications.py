"""
User-facing notifications for the deposit flow.
"""

import logging
from typing import Dict, List

from src.integrations.contracts.interfaces import Notification, NotificationVariant

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Writes notifications to the log. Default notifier for scripts."""

    def notify(self, notification: Notification) -> None:
        if notification.variant == NotificationVariant.DESTRUCTIVE:
            logger.warning("%s: %s", notification.title, notification.description)
        else:
            logger.info("%s: %s", notification.title, notification.description)


class RecordingNotifier(LoggingNotifier):
    """Keeps every notification so the API can hand them back to the client."""

    def __init__(self) -> None:
        self.messages: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        super().notify(notification)
        self.messages.append(notification)

    def to_list(self) -> List[Dict[str, str]]:
        return [m.to_dict() for m in self.messages]
