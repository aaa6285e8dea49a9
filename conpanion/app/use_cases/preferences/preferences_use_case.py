"""
Notification Preference Use Cases

Per-type channel switches and the per-user settings (kill switch, quiet hours).
"""

from datetime import time
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from libs.result import Error, Result, Return
from conpanion.app.services.notification_engine import NotificationEngine
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import NotificationType

from .dtos import PreferenceItem, PreferencesResponse, SettingsItem


def is_valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


class GetNotificationPreferencesUseCase:
    """All per-type preferences plus settings; missing rows get defaults first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[PreferencesResponse]:
        async with self.uow:
            await self.uow.preferences.create_defaults(user_id)
            settings = await NotificationEngine(self.uow).get_or_create_settings(user_id)
            preferences = await self.uow.preferences.list_for_user(user_id)
            await self.uow.commit()

            return Return.ok(
                PreferencesResponse(
                    preferences=[PreferenceItem.from_entity(p) for p in preferences],
                    settings=SettingsItem.from_entity(settings),
                )
            )


class UpdateNotificationPreferenceUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        type: NotificationType,
        email_enabled: Optional[bool] = None,
        push_enabled: Optional[bool] = None,
        in_app_enabled: Optional[bool] = None,
    ) -> Result[PreferenceItem]:
        async with self.uow:
            preference = await NotificationEngine(self.uow).get_or_create_preference(
                user_id, type
            )
            if email_enabled is not None:
                preference.email_enabled = email_enabled
            if push_enabled is not None:
                preference.push_enabled = push_enabled
            if in_app_enabled is not None:
                preference.in_app_enabled = in_app_enabled
            preference.updated_at = utcnow()

            preference = await self.uow.preferences.update(preference)
            await self.uow.commit()
            return Return.ok(PreferenceItem.from_entity(preference))


class UpdateNotificationSettingsUseCase:
    """
    Updates the kill switch and quiet hours.

    Business Rules:
    - Quiet hours need both a start and an end when enabled
    - start > end means the window wraps past midnight
    - timezone must be a valid IANA name
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        notifications_enabled: Optional[bool] = None,
        quiet_hours_enabled: Optional[bool] = None,
        quiet_hours_start: Optional[time] = None,
        quiet_hours_end: Optional[time] = None,
        timezone: Optional[str] = None,
    ) -> Result[SettingsItem]:
        if timezone is not None and not is_valid_timezone(timezone):
            return Return.err(Error("INVALID_INPUT", f"Unknown timezone: {timezone}"))

        async with self.uow:
            settings = await NotificationEngine(self.uow).get_or_create_settings(user_id)

            if notifications_enabled is not None:
                settings.notifications_enabled = notifications_enabled
            if quiet_hours_enabled is not None:
                settings.quiet_hours_enabled = quiet_hours_enabled
            if quiet_hours_start is not None:
                settings.quiet_hours_start = quiet_hours_start
            if quiet_hours_end is not None:
                settings.quiet_hours_end = quiet_hours_end
            if timezone is not None:
                settings.timezone = timezone

            if settings.quiet_hours_enabled and (
                settings.quiet_hours_start is None or settings.quiet_hours_end is None
            ):
                return Return.err(
                    Error("INVALID_INPUT", "Quiet hours need a start and an end time")
                )

            settings.updated_at = utcnow()
            settings = await self.uow.notification_settings.update(settings)
            await self.uow.commit()
            return Return.ok(SettingsItem.from_entity(settings))
