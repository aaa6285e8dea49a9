"""
Push Subscription Use Cases

Registering, removing and listing the devices a user receives push on.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import DevicePlatform, PushSubscription

from .dtos import CleanupSubscriptionsResponse, PushSubscriptionItem, PushSubscriptionList

logger = logging.getLogger(__name__)

INACTIVE_SUBSCRIPTION_RETENTION_DAYS = 30


class SubscribePushUseCase:
    """Upsert on (user, endpoint); an existing row is refreshed and reactivated"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        endpoint: str,
        platform: DevicePlatform = DevicePlatform.web,
        p256dh: Optional[str] = None,
        auth: Optional[str] = None,
        user_agent: Optional[str] = None,
        device_name: Optional[str] = None,
    ) -> Result[PushSubscriptionItem]:
        if not (endpoint or "").strip():
            return Return.err(Error("INVALID_INPUT", "endpoint is required"))
        if platform == DevicePlatform.web and not (p256dh and auth):
            return Return.err(
                Error("INVALID_INPUT", "Web push subscriptions need p256dh and auth keys")
            )

        async with self.uow:
            now = utcnow()
            subscription = await self.uow.push_subscriptions.get(user_id, endpoint)
            if subscription is None:
                subscription = await self.uow.push_subscriptions.create(
                    PushSubscription(
                        user_id=user_id,
                        platform=platform,
                        endpoint=endpoint,
                        p256dh=p256dh,
                        auth=auth,
                        user_agent=user_agent,
                        device_name=device_name,
                        last_used_at=now,
                    )
                )
            else:
                subscription.platform = platform
                subscription.p256dh = p256dh
                subscription.auth = auth
                subscription.user_agent = user_agent
                subscription.device_name = device_name or subscription.device_name
                subscription.is_active = True
                subscription.push_enabled = True
                subscription.last_used_at = now
                subscription.updated_at = now
                subscription = await self.uow.push_subscriptions.update(subscription)
            await self.uow.commit()

            return Return.ok(PushSubscriptionItem.from_entity(subscription))


class UnsubscribePushUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, endpoint: str) -> Result[PushSubscriptionItem]:
        async with self.uow:
            subscription = await self.uow.push_subscriptions.get(user_id, endpoint)
            if subscription is None:
                return Return.err(Error("NOT_FOUND", "Push subscription not found"))

            subscription.is_active = False
            subscription.updated_at = utcnow()
            subscription = await self.uow.push_subscriptions.update(subscription)
            await self.uow.commit()
            return Return.ok(PushSubscriptionItem.from_entity(subscription))


class ListPushSubscriptionsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[PushSubscriptionList]:
        async with self.uow:
            subscriptions = await self.uow.push_subscriptions.list_for_user(user_id)
            return Return.ok(
                PushSubscriptionList(
                    subscriptions=[PushSubscriptionItem.from_entity(s) for s in subscriptions]
                )
            )


class CleanupInactiveSubscriptionsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, days: int = INACTIVE_SUBSCRIPTION_RETENTION_DAYS
    ) -> Result[CleanupSubscriptionsResponse]:
        async with self.uow:
            deleted = await self.uow.push_subscriptions.delete_inactive_before(
                utcnow() - timedelta(days=days)
            )
            await self.uow.commit()

        if deleted:
            logger.info("Deleted %d inactive push subscriptions", deleted)
        return Return.ok(CleanupSubscriptionsResponse(deleted=deleted))
