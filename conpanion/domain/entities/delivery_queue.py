"""
Delivery Queue Entities

Durable email and push work items drained by the scheduler.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import DeliveryStatus, DevicePlatform, NotificationPriority

MAX_QUEUE_RETRIES = 5

EMAIL_PRIORITY_DELAY = {
    NotificationPriority.critical: timedelta(0),
    NotificationPriority.high: timedelta(minutes=5),
    NotificationPriority.medium: timedelta(minutes=15),
    NotificationPriority.low: timedelta(minutes=30),
}


def email_scheduled_for(priority: NotificationPriority, now: datetime) -> datetime:
    return now + EMAIL_PRIORITY_DELAY[priority]


class EmailQueueEntry(SQLModel, table=True):
    """
    Email queue entry - one per (notification, recipient address).

    Business Rules:
    - Picked up only while pending and due
    - retry_count is capped at 5
    """

    __tablename__ = "email_queue"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    notification_id: UUID = Field(
        foreign_key="notifications.id", nullable=False, index=True
    )
    user_id: UUID = Field(foreign_key="users.id", nullable=False)

    to_email: str = Field(max_length=255, nullable=False)
    to_name: Optional[str] = Field(default=None, max_length=255)
    subject: str = Field(max_length=255, nullable=False)
    template_id: str = Field(max_length=100, nullable=False)
    template_data: dict = Field(default_factory=dict, sa_column=Column(JSON))

    priority: NotificationPriority = Field(default=NotificationPriority.medium)
    status: DeliveryStatus = Field(default=DeliveryStatus.pending)
    scheduled_for: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    retry_count: int = Field(default=0)
    error_message: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_email_queue_status_scheduled", "status", "scheduled_for"),
    )


class PushQueueEntry(SQLModel, table=True):
    """
    Push queue entry - one per (notification, push subscription).
    """

    __tablename__ = "push_queue"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    notification_id: UUID = Field(
        foreign_key="notifications.id", nullable=False, index=True
    )
    user_id: UUID = Field(foreign_key="users.id", nullable=False)
    subscription_id: UUID = Field(foreign_key="push_subscriptions.id", nullable=False)

    platform: DevicePlatform = Field(default=DevicePlatform.web)
    token: str = Field(nullable=False)
    payload: dict = Field(default_factory=dict, sa_column=Column(JSON))

    priority: NotificationPriority = Field(default=NotificationPriority.medium)
    status: DeliveryStatus = Field(default=DeliveryStatus.pending)
    scheduled_for: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    sent_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    retry_count: int = Field(default=0)
    error_message: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_push_queue_status_scheduled", "status", "scheduled_for"),
    )
