"""
Notification Entities

In-app notifications, their per-channel delivery tracking, and the
templates they are rendered from.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import (
    DeliveryChannel,
    DeliveryStatus,
    EntityKind,
    NotificationPriority,
    NotificationType,
)

TITLE_MAX_LENGTH = 255
MESSAGE_MAX_LENGTH = 1000


class Notification(SQLModel, table=True):
    """
    Notification entity - one row per recipient per event.

    Business Rules:
    - Created only by the notification engine
    - Immutable except for the read transition, done by the recipient
    - Purged by the retention sweep after 90 days
    """

    __tablename__ = "notifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    type: NotificationType = Field(nullable=False)
    priority: NotificationPriority = Field(default=NotificationPriority.medium)
    title: str = Field(max_length=TITLE_MAX_LENGTH, nullable=False)
    message: str = Field(max_length=MESSAGE_MAX_LENGTH, nullable=False)
    data: dict = Field(default_factory=dict, sa_column=Column(JSON))

    entity_type: Optional[EntityKind] = Field(default=None)
    entity_id: Optional[UUID] = Field(default=None)

    is_read: bool = Field(default=False)
    read_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_by: Optional[UUID] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_notification_user_read", "user_id", "is_read"),
        Index("idx_notification_created_at", "created_at"),
        Index("idx_notification_entity", "entity_type", "entity_id"),
    )


class NotificationDelivery(SQLModel, table=True):
    """
    Delivery tracking - one row per (notification, channel) attempt outcome.
    """

    __tablename__ = "notification_deliveries"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    notification_id: UUID = Field(
        foreign_key="notifications.id", nullable=False, index=True
    )
    channel: DeliveryChannel = Field(nullable=False)
    status: DeliveryStatus = Field(default=DeliveryStatus.pending)

    delivered_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    retry_count: int = Field(default=0)
    error_message: Optional[str] = Field(default=None)
    details: dict = Field(default_factory=dict, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class NotificationTemplate(SQLModel, table=True):
    """
    Template keyed by (type, name) with positional %s placeholders.

    Business Rules:
    - Lookup falls back to name "default" for the same type
    - Inactive templates are ignored
    """

    __tablename__ = "notification_templates"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    type: NotificationType = Field(nullable=False)
    name: str = Field(default="default", max_length=100, nullable=False)

    subject_template: str = Field(nullable=False)
    message_template: str = Field(nullable=False)
    description: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uq_notification_template_type_name", "type", "name", unique=True),
    )
