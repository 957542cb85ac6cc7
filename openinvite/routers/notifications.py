from fastapi import APIRouter, Depends, Query
from typing import Dict, Any
from ..dependencies.permissions import get_current_user_id
from ..services.notification_service import NotificationService
from ..store import PlanStore, get_store
from ..utils.router_helpers import handle_service_errors, RouterResponse

router = APIRouter(tags=["notifications"])


@router.get("/", response_model=Dict[str, Any])
@handle_service_errors
async def get_notifications(
    unread_only: bool = Query(False),
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Get user notifications, newest first"""

    notification_service = NotificationService(store)
    notifications = notification_service.list_notifications(
        current_user_id, unread_only=unread_only
    )
    return RouterResponse.success(
        data={
            "notifications": notifications,
            "unread_count": notification_service.unread_count(current_user_id),
        }
    )


@router.get("/unread-count", response_model=Dict[str, Any])
@handle_service_errors
async def get_unread_count(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    count = NotificationService(store).unread_count(current_user_id)
    return RouterResponse.success(data={"unread_count": count})


@router.put("/read-all", response_model=Dict[str, Any])
@handle_service_errors
async def mark_all_as_read(
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Mark all notifications as read"""

    count = NotificationService(store).mark_all_as_read(current_user_id)
    return RouterResponse.updated(
        data={"marked_count": count}, message=f"Marked {count} notifications as read"
    )


@router.put("/{notification_id}/read", response_model=Dict[str, Any])
@handle_service_errors
async def mark_notification_as_read(
    notification_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    """Mark notification as read"""

    notification = NotificationService(store).mark_as_read(
        notification_id, current_user_id
    )
    return RouterResponse.updated(data={"notification": notification})


@router.delete("/{notification_id}", response_model=Dict[str, Any])
@handle_service_errors
async def delete_notification(
    notification_id: str,
    store: PlanStore = Depends(get_store),
    current_user_id: str = Depends(get_current_user_id),
):
    NotificationService(store).delete_notification(notification_id, current_user_id)
    return RouterResponse.deleted(message="Notification deleted")
