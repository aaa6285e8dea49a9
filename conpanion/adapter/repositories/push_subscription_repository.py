from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.app.repositories.push_subscription_repository import (
    IPushSubscriptionRepository,
)
from conpanion.domain.entities import PushQueueEntry, PushSubscription


class PushSubscriptionRepository(IPushSubscriptionRepository):
    """Push subscription repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: UUID, endpoint: str) -> Optional[PushSubscription]:
        stmt = select(PushSubscription).where(
            PushSubscription.user_id == user_id,
            PushSubscription.endpoint == endpoint,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self, user_id: UUID, push_enabled_only: bool = False
    ) -> List[PushSubscription]:
        stmt = select(PushSubscription).where(
            PushSubscription.user_id == user_id,
            PushSubscription.is_active.is_(True),
        )
        if push_enabled_only:
            stmt = stmt.where(PushSubscription.push_enabled.is_(True))
        stmt = stmt.order_by(PushSubscription.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, subscription: PushSubscription) -> PushSubscription:
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def update(self, subscription: PushSubscription) -> PushSubscription:
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def delete_inactive_before(self, cutoff: datetime) -> int:
        stale_ids = select(PushSubscription.id).where(
            PushSubscription.is_active.is_(False),
            PushSubscription.updated_at < cutoff,
        )
        await self.session.execute(
            delete(PushQueueEntry).where(PushQueueEntry.subscription_id.in_(stale_ids))
        )
        result = await self.session.execute(
            delete(PushSubscription).where(
                PushSubscription.is_active.is_(False),
                PushSubscription.updated_at < cutoff,
            )
        )
        return result.rowcount or 0
