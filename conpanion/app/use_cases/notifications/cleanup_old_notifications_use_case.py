"""
Cleanup Old Notifications Use Case

Retention sweep: notifications after 90 days, delivery tracking after 30 days
and finished queue rows after 7 days.
"""

import logging
from datetime import timedelta

from libs.result import Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow

from .dtos import CleanupNotificationsResponse

logger = logging.getLogger(__name__)

NOTIFICATION_RETENTION = timedelta(days=90)
DELIVERY_RETENTION = timedelta(days=30)
QUEUE_RETENTION = timedelta(days=7)


class CleanupOldNotificationsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[CleanupNotificationsResponse]:
        now = utcnow()
        async with self.uow:
            email_rows = await self.uow.email_queue.delete_finished_before(
                now - QUEUE_RETENTION
            )
            push_rows = await self.uow.push_queue.delete_finished_before(
                now - QUEUE_RETENTION
            )
            deliveries = await self.uow.deliveries.delete_created_before(
                now - DELIVERY_RETENTION
            )
            notifications = await self.uow.notifications.delete_created_before(
                now - NOTIFICATION_RETENTION
            )
            await self.uow.commit()

        logger.info(
            "Notification cleanup removed %d notifications, %d deliveries, "
            "%d email and %d push queue rows",
            notifications,
            deliveries,
            email_rows,
            push_rows,
        )
        return Return.ok(
            CleanupNotificationsResponse(
                notifications=notifications,
                deliveries=deliveries,
                email_queue=email_rows,
                push_queue=push_rows,
            )
        )
