"""
Notification Schemas
"""
from typing import List, Optional
from datetime import datetime
from hrportal.schemas.base import CamelModel


class NotificationResponse(CamelModel):
    id: int
    title: str
    message: str
    is_read: bool
    created_at: datetime


class NotificationListResponse(CamelModel):
    notifications: List[NotificationResponse]


class UnreadCountResponse(CamelModel):
    count: int


class MarkAsReadRequest(CamelModel):
    """Either a single notification id or markAll=true."""
    notification_id: Optional[int] = None
    mark_all: bool = False
