# claimintel/storage/notification_store.py
"""Notification storage implementation."""

from typing import Dict, Any, Optional, List

from claimintel.storage.base import BaseStore
from claimintel.models.notification import AppNotification
from claimintel.core.config import settings


class NotificationStore(BaseStore[AppNotification]):
    """Storage for the `notifications` collection."""

    timestamp_fields = ("timestamp",)

    def __init__(self, data_dir: Optional[str] = None):
        super().__init__(
            data_dir=data_dir or settings.DATA_DIR,
            collection="notifications"
        )

    def _get_id(self, entity: AppNotification) -> str:
        return entity.id

    def _serialize(self, entity: AppNotification) -> Dict[str, Any]:
        return entity.model_dump(mode='json')

    def _deserialize(self, data: Dict[str, Any]) -> AppNotification:
        return AppNotification.model_validate(data)

    def list_newest_first(self, limit: Optional[int] = None) -> List[AppNotification]:
        """Notifications ordered by timestamp, newest first."""
        return self.list_ordered("timestamp", descending=True, limit=limit)

    def unread_count(self) -> int:
        return sum(1 for n in self.get_all() if not n.read)
