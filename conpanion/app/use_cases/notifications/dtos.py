"""
Notification Use Case DTOs (Data Transfer Objects)
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from conpanion.domain.entities import Notification


class NotificationItem(BaseModel):
    id: str
    type: str
    priority: str
    title: str
    message: str
    data: Dict[str, Any]
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    is_read: bool
    read_at: Optional[str] = None
    created_at: str

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationItem":
        return cls(
            id=str(notification.id),
            type=notification.type.value,
            priority=notification.priority.value,
            title=notification.title,
            message=notification.message,
            data=notification.data or {},
            entity_type=notification.entity_type.value if notification.entity_type else None,
            entity_id=str(notification.entity_id) if notification.entity_id else None,
            is_read=notification.is_read,
            read_at=notification.read_at.isoformat() if notification.read_at else None,
            created_at=notification.created_at.isoformat(),
        )


class NotificationPage(BaseModel):
    notifications: List[NotificationItem]
    unread_count: int
    limit: int
    offset: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int


class SystemNotificationResponse(BaseModel):
    created: int
    notification_ids: List[str]


class CleanupNotificationsResponse(BaseModel):
    notifications: int
    deliveries: int
    email_queue: int
    push_queue: int


class SeedTemplatesResponse(BaseModel):
    created: int
