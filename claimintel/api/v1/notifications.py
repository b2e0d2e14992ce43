# claimintel/api/v1/notifications.py
from fastapi import APIRouter, Depends

from claimintel.models.notification import AppNotification
from claimintel.models.schemas import NotificationListResponse
from claimintel.services.notification_service import NotificationService
from claimintel.core.dependencies import get_notification_service

router = APIRouter()


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
    service: NotificationService = Depends(get_notification_service)
):
    """Notification feed, newest first."""
    notifications = service.list_notifications()
    return NotificationListResponse(
        total=len(notifications),
        unread=sum(1 for n in notifications if not n.read),
        notifications=notifications
    )


@router.post("/{notification_id}/read", response_model=AppNotification)
async def mark_as_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service)
):
    return service.mark_notification_as_read(notification_id)


@router.delete("/")
async def clear_notifications(
    service: NotificationService = Depends(get_notification_service)
):
    """Remove every notification."""
    service.clear_notifications()
    return {"success": True, "message": "Notifications cleared"}
