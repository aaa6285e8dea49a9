"""
Push Subscription Entity

A device able to receive push: a Web Push subscription or a native token.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import DevicePlatform


class PushSubscription(SQLModel, table=True):
    """
    Push subscription - unique per (user_id, endpoint).

    Business Rules:
    - Re-subscribing the same endpoint reactivates the existing row
    - Only active, push-enabled subscriptions receive push queue entries
    """

    __tablename__ = "push_subscriptions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    platform: DevicePlatform = Field(default=DevicePlatform.web)
    endpoint: str = Field(nullable=False)
    p256dh: Optional[str] = Field(default=None)
    auth: Optional[str] = Field(default=None)
    user_agent: Optional[str] = Field(default=None)
    device_name: Optional[str] = Field(default=None, max_length=255)

    push_enabled: bool = Field(default=True)
    is_active: bool = Field(default=True)
    last_used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uq_push_subscription_user_endpoint", "user_id", "endpoint", unique=True),
    )
