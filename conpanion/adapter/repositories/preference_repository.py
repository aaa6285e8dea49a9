from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.adapter.repositories.dialect import dialect_insert
from conpanion.app.repositories.preference_repository import (
    INotificationPreferenceRepository,
    INotificationSettingsRepository,
)
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    NotificationPreference,
    NotificationSettings,
    NotificationType,
)


class NotificationPreferenceRepository(INotificationPreferenceRepository):
    """Per-type preference repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(
        self, user_id: UUID, type: NotificationType
    ) -> Optional[NotificationPreference]:
        stmt = select(NotificationPreference).where(
            NotificationPreference.user_id == user_id,
            NotificationPreference.type == type,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: UUID) -> List[NotificationPreference]:
        stmt = (
            select(NotificationPreference)
            .where(NotificationPreference.user_id == user_id)
            .order_by(NotificationPreference.type)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, preference: NotificationPreference) -> NotificationPreference:
        self.session.add(preference)
        await self.session.flush()
        await self.session.refresh(preference)
        return preference

    async def update(self, preference: NotificationPreference) -> NotificationPreference:
        self.session.add(preference)
        await self.session.flush()
        await self.session.refresh(preference)
        return preference

    async def create_defaults(self, user_id: UUID) -> None:
        now = utcnow()
        rows = [
            {
                "id": uuid4(),
                "user_id": user_id,
                "type": notification_type,
                "email_enabled": True,
                "push_enabled": False,
                "in_app_enabled": True,
                "created_at": now,
                "updated_at": now,
            }
            for notification_type in NotificationType
        ]
        stmt = dialect_insert(self.session, NotificationPreference).values(rows)
        stmt = stmt.on_conflict_do_nothing(index_elements=["user_id", "type"])
        await self.session.execute(stmt)


class NotificationSettingsRepository(INotificationSettingsRepository):
    """Per-user settings repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: UUID) -> Optional[NotificationSettings]:
        stmt = select(NotificationSettings).where(
            NotificationSettings.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, settings: NotificationSettings) -> NotificationSettings:
        self.session.add(settings)
        await self.session.flush()
        await self.session.refresh(settings)
        return settings

    async def update(self, settings: NotificationSettings) -> NotificationSettings:
        self.session.add(settings)
        await self.session.flush()
        await self.session.refresh(settings)
        return settings
