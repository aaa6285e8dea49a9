from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.app.repositories.notification_repository import (
    INotificationDeliveryRepository,
    INotificationRepository,
    INotificationTemplateRepository,
)
from conpanion.domain.entities import (
    EmailQueueEntry,
    Notification,
    NotificationDelivery,
    NotificationTemplate,
    NotificationType,
    PushQueueEntry,
)
from conpanion.domain.templates import TemplateSeed


class NotificationRepository(INotificationRepository):
    """Notification repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        stmt = select(Notification).where(Notification.id == notification_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self, user_id: UUID, unread_only: bool, limit: int, offset: int
    ) -> List[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = (
            stmt.order_by(Notification.created_at.desc()).limit(limit).offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_unread(self, user_id: UUID) -> int:
        stmt = select(func.count(Notification.id)).where(
            Notification.user_id == user_id, Notification.is_read.is_(False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def update(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        await self.session.refresh(notification)
        return notification

    async def mark_all_read(self, user_id: UUID, now: datetime) -> int:
        stmt = select(Notification).where(
            Notification.user_id == user_id, Notification.is_read.is_(False)
        )
        result = await self.session.execute(stmt)
        notifications = list(result.scalars().all())
        for notification in notifications:
            notification.is_read = True
            notification.read_at = now
            notification.updated_at = now
            self.session.add(notification)
        await self.session.flush()
        return len(notifications)

    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete old notifications together with rows that reference them"""
        expired_ids = select(Notification.id).where(Notification.created_at < cutoff)
        for dependent in (NotificationDelivery, EmailQueueEntry, PushQueueEntry):
            await self.session.execute(
                delete(dependent).where(dependent.notification_id.in_(expired_ids))
            )
        result = await self.session.execute(
            delete(Notification).where(Notification.created_at < cutoff)
        )
        return result.rowcount or 0


class NotificationDeliveryRepository(INotificationDeliveryRepository):
    """Delivery tracking repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, delivery: NotificationDelivery) -> NotificationDelivery:
        self.session.add(delivery)
        await self.session.flush()
        await self.session.refresh(delivery)
        return delivery

    async def list_for_notification(
        self, notification_id: UUID
    ) -> List[NotificationDelivery]:
        stmt = (
            select(NotificationDelivery)
            .where(NotificationDelivery.notification_id == notification_id)
            .order_by(NotificationDelivery.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_created_before(self, cutoff: datetime) -> int:
        result = await self.session.execute(
            delete(NotificationDelivery).where(NotificationDelivery.created_at < cutoff)
        )
        return result.rowcount or 0


class NotificationTemplateRepository(INotificationTemplateRepository):
    """Notification template repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active(
        self, type: NotificationType, name: str
    ) -> Optional[NotificationTemplate]:
        stmt = select(NotificationTemplate).where(
            NotificationTemplate.type == type,
            NotificationTemplate.name == name,
            NotificationTemplate.is_active.is_(True),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> List[NotificationTemplate]:
        stmt = select(NotificationTemplate).order_by(
            NotificationTemplate.type, NotificationTemplate.name
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_missing(self, seeds: Sequence[TemplateSeed]) -> int:
        existing = {
            (template.type, template.name) for template in await self.list_all()
        }
        created = 0
        for seed in seeds:
            if (seed.type, seed.name) in existing:
                continue
            self.session.add(
                NotificationTemplate(
                    type=seed.type,
                    name=seed.name,
                    subject_template=seed.subject,
                    message_template=seed.message,
                    description=seed.description,
                )
            )
            existing.add((seed.type, seed.name))
            created += 1
        await self.session.flush()
        return created
