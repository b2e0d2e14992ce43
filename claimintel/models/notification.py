# claimintel/models/notification.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from claimintel.models.base import utcnow
from claimintel.core.constants import NotificationType


class NotificationCreate(BaseModel):
    """Fields supplied when recording a notification."""
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    claim_id: Optional[str] = None  # label only, not an owning relation


class AppNotification(NotificationCreate):
    """User-visible event about claim processing."""
    id: str
    timestamp: datetime = Field(default_factory=utcnow)
    read: bool = False
