"""
Mark Read Use Cases
"""

from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow

from .dtos import MarkAllReadResponse, NotificationItem


class MarkNotificationReadUseCase:
    """
    Marks one notification as read.

    Business Rules:
    - Only the recipient can mark it; others get NOT_FOUND
    - Marking an already read notification keeps the original read_at
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, notification_id: UUID, user_id: UUID
    ) -> Result[NotificationItem]:
        async with self.uow:
            notification = await self.uow.notifications.get_by_id(notification_id)
            if notification is None or notification.user_id != user_id:
                return Return.err(Error("NOT_FOUND", "Notification not found"))

            if not notification.is_read:
                now = utcnow()
                notification.is_read = True
                notification.read_at = now
                notification.updated_at = now
                notification = await self.uow.notifications.update(notification)
                await self.uow.commit()

            return Return.ok(NotificationItem.from_entity(notification))


class MarkAllNotificationsReadUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[MarkAllReadResponse]:
        async with self.uow:
            updated = await self.uow.notifications.mark_all_read(user_id, utcnow())
            await self.uow.commit()
            return Return.ok(MarkAllReadResponse(updated=updated))
