"""
Notification Preference Entities

Per-(user, type) channel switches and per-user delivery settings.
"""

from datetime import UTC, datetime, time
from typing import Optional
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import NotificationType


class NotificationPreference(SQLModel, table=True):
    """
    Channel switches for one notification type.

    Business Rules:
    - One row per (user_id, type)
    - Defaults: email on, push off, in-app on
    - Created eagerly at signup, lazily by the engine if missing
    """

    __tablename__ = "notification_preferences"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False)
    type: NotificationType = Field(nullable=False)

    email_enabled: bool = Field(default=True)
    push_enabled: bool = Field(default=False)
    in_app_enabled: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uq_notification_preference_user_type", "user_id", "type", unique=True),
    )


class NotificationSettings(SQLModel, table=True):
    """
    Per-user delivery settings: global kill switch and push quiet hours.
    """

    __tablename__ = "notification_settings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, unique=True)

    notifications_enabled: bool = Field(default=True)
    quiet_hours_enabled: bool = Field(default=False)
    quiet_hours_start: Optional[time] = Field(default=None)
    quiet_hours_end: Optional[time] = Field(default=None)
    timezone: str = Field(default="UTC", max_length=64)

    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    def in_quiet_hours(self, now: datetime) -> bool:
        """Whether ``now`` (naive UTC) falls inside the user's quiet hours."""
        if not self.quiet_hours_enabled:
            return False
        if self.quiet_hours_start is None or self.quiet_hours_end is None:
            return False

        try:
            zone = ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            zone = ZoneInfo("UTC")
        local_time = now.replace(tzinfo=UTC).astimezone(zone).time()

        start, end = self.quiet_hours_start, self.quiet_hours_end
        if start <= end:
            return start <= local_time <= end
        # Window wraps past midnight
        return local_time >= start or local_time <= end
