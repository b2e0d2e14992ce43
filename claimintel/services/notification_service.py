# claimintel/services/notification_service.py
"""User-facing notifications about claim processing."""

import itertools
import time
from typing import List, Optional

from claimintel.models.notification import AppNotification, NotificationCreate
from claimintel.storage.notification_store import NotificationStore
from claimintel.core.constants import NotificationType
from claimintel.core.config import settings
from claimintel.core.exceptions import NotificationNotFoundError
from claimintel.core.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Newest-first notification feed capped at `max_notifications` entries."""

    def __init__(self, store: NotificationStore, max_notifications: Optional[int] = None):
        self.store = store
        self.max_notifications = max_notifications or settings.MAX_NOTIFICATIONS
        self._counter = itertools.count(1)

    def _next_id(self) -> str:
        return f"notif_{int(time.time() * 1000)}_{next(self._counter)}"

    def add_notification(
        self,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        claim_id: Optional[str] = None
    ) -> AppNotification:
        """Record a notification and drop anything past the cap."""
        notification = AppNotification(
            id=self._next_id(),
            title=title,
            message=message,
            type=type,
            claim_id=claim_id
        )
        self.store.save(notification)
        self._truncate()

        log = logger.error if notification.type == NotificationType.ERROR else logger.info
        log(f"Notification: {title} - {message}", claim_id=claim_id)
        return notification

    def add(self, data: NotificationCreate) -> AppNotification:
        return self.add_notification(data.title, data.message, data.type, data.claim_id)

    def _truncate(self):
        overflow = self.store.list_newest_first()[self.max_notifications:]
        if overflow:
            self.store.delete_many(n.id for n in overflow)

    def list_notifications(self) -> List[AppNotification]:
        return self.store.list_newest_first()

    def unread_count(self) -> int:
        return self.store.unread_count()

    def mark_notification_as_read(self, notification_id: str) -> AppNotification:
        notification = self.store.get(notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        if not notification.read:
            notification = notification.model_copy(update={"read": True})
            self.store.save(notification)
        return notification

    def clear_notifications(self):
        self.store.clear()
