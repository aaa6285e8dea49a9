from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import case, delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.app.repositories.delivery_queue_repository import (
    IEmailQueueRepository,
    IPushQueueRepository,
)
from conpanion.domain.entities import (
    DeliveryStatus,
    EmailQueueEntry,
    NotificationPriority,
    PushQueueEntry,
)

PRIORITY_RANK = {
    NotificationPriority.critical: 4,
    NotificationPriority.high: 3,
    NotificationPriority.medium: 2,
    NotificationPriority.low: 1,
}


class _DeliveryQueueRepository:
    """Shared SQLModel implementation for the email and push queues"""

    model = None

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, entry_id: UUID):
        stmt = select(self.model).where(self.model.id == entry_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, entry):
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def update(self, entry):
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def update_many(self, entries: List) -> None:
        self.session.add_all(entries)
        await self.session.flush()

    async def list_due(self, now: datetime, limit: int) -> List:
        priority_rank = case(PRIORITY_RANK, value=self.model.priority, else_=0)
        stmt = (
            select(self.model)
            .where(
                self.model.status == DeliveryStatus.pending,
                self.model.scheduled_for <= now,
            )
            .order_by(priority_rank.desc(), self.model.scheduled_for)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_notification(self, notification_id: UUID) -> List:
        stmt = select(self.model).where(self.model.notification_id == notification_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def rearm_failed(
        self,
        now: datetime,
        max_retries: int,
        lookback: timedelta,
        backoff: timedelta,
    ) -> int:
        stmt = select(self.model).where(
            self.model.status == DeliveryStatus.failed,
            self.model.retry_count < max_retries,
            self.model.created_at > now - lookback,
        )
        result = await self.session.execute(stmt)
        entries = list(result.scalars().all())
        for entry in entries:
            entry.status = DeliveryStatus.pending
            entry.scheduled_for = now + backoff * entry.retry_count
            entry.error_message = None
            entry.updated_at = now
            self.session.add(entry)
        await self.session.flush()
        return len(entries)

    async def delete_finished_before(self, cutoff: datetime) -> int:
        result = await self.session.execute(
            delete(self.model).where(
                self.model.status.in_([DeliveryStatus.sent, DeliveryStatus.failed]),
                self.model.created_at < cutoff,
            )
        )
        return result.rowcount or 0


class EmailQueueRepository(_DeliveryQueueRepository, IEmailQueueRepository):
    """Email queue repository implementation using SQLModel"""

    model = EmailQueueEntry


class PushQueueRepository(_DeliveryQueueRepository, IPushQueueRepository):
    """Push queue repository implementation using SQLModel"""

    model = PushQueueEntry
