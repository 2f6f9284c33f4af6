"""
Notification Endpoints

In-app notifications. Every query is scoped to the caller.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.notification import Notification
from hrportal.schemas.base import SuccessResponse
from hrportal.schemas.notification import NotificationListResponse, UnreadCountResponse, MarkAsReadRequest
from hrportal.api.deps import get_current_user

router = APIRouter(tags=["notifications"])

NOTIFICATION_LIMIT = 50


@router.post("/getNotifications", response_model=NotificationListResponse)
async def get_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The 50 most recent notifications."""
    notifications = db.query(Notification).filter(
        Notification.user_id == current_user.id
    ).order_by(
        Notification.created_at.desc(), Notification.id.desc()
    ).limit(NOTIFICATION_LIMIT).all()

    return {"notifications": notifications}


@router.post("/getUnreadCount", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    count = db.query(Notification).filter(
        Notification.user_id == current_user.id,
        Notification.is_read == False  # noqa: E712
    ).count()

    return {"count": count}


@router.post("/markAsRead", response_model=SuccessResponse)
async def mark_as_read(
    request: MarkAsReadRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Mark one notification, or all of them, as read.

    NOTE: An id belonging to someone else matches nothing and is
    silently ignored rather than reported.
    """
    query = db.query(Notification).filter(
        Notification.user_id == current_user.id,
        Notification.is_read == False  # noqa: E712
    )

    if request.mark_all:
        query.update({Notification.is_read: True}, synchronize_session=False)
    elif request.notification_id is not None:
        query.filter(Notification.id == request.notification_id).update(
            {Notification.is_read: True}, synchronize_session=False
        )

    db.commit()

    return {"success": True}
