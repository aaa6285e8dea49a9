"""
Preference Use Case DTOs (Data Transfer Objects)
"""

from datetime import time
from typing import List, Optional

from pydantic import BaseModel

from conpanion.domain.entities import (
    NotificationPreference,
    NotificationSettings,
    PushSubscription,
)


class PreferenceItem(BaseModel):
    type: str
    email_enabled: bool
    push_enabled: bool
    in_app_enabled: bool

    @classmethod
    def from_entity(cls, preference: NotificationPreference) -> "PreferenceItem":
        return cls(
            type=preference.type.value,
            email_enabled=preference.email_enabled,
            push_enabled=preference.push_enabled,
            in_app_enabled=preference.in_app_enabled,
        )


class SettingsItem(BaseModel):
    notifications_enabled: bool
    quiet_hours_enabled: bool
    quiet_hours_start: Optional[time] = None
    quiet_hours_end: Optional[time] = None
    timezone: str

    @classmethod
    def from_entity(cls, settings: NotificationSettings) -> "SettingsItem":
        return cls(
            notifications_enabled=settings.notifications_enabled,
            quiet_hours_enabled=settings.quiet_hours_enabled,
            quiet_hours_start=settings.quiet_hours_start,
            quiet_hours_end=settings.quiet_hours_end,
            timezone=settings.timezone,
        )


class PreferencesResponse(BaseModel):
    preferences: List[PreferenceItem]
    settings: SettingsItem


class PushSubscriptionItem(BaseModel):
    id: str
    platform: str
    endpoint: str
    device_name: Optional[str] = None
    push_enabled: bool
    is_active: bool
    last_used_at: Optional[str] = None

    @classmethod
    def from_entity(cls, subscription: PushSubscription) -> "PushSubscriptionItem":
        return cls(
            id=str(subscription.id),
            platform=subscription.platform.value,
            endpoint=subscription.endpoint,
            device_name=subscription.device_name,
            push_enabled=subscription.push_enabled,
            is_active=subscription.is_active,
            last_used_at=(
                subscription.last_used_at.isoformat() if subscription.last_used_at else None
            ),
        )


class PushSubscriptionList(BaseModel):
    subscriptions: List[PushSubscriptionItem]


class CleanupSubscriptionsResponse(BaseModel):
    deleted: int
