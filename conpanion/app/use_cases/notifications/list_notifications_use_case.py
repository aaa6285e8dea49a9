"""
List Notifications Use Cases
"""

from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork

from .dtos import NotificationItem, NotificationPage, UnreadCountResponse

MAX_PAGE_SIZE = 100


class ListNotificationsUseCase:
    """A user's notifications, newest first, optionally unread only"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, unread_only: bool = False, limit: int = 20, offset: int = 0
    ) -> Result[NotificationPage]:
        if limit < 1 or limit > MAX_PAGE_SIZE or offset < 0:
            return Return.err(
                Error("INVALID_INPUT", f"limit must be 1-{MAX_PAGE_SIZE}, offset >= 0")
            )

        async with self.uow:
            notifications = await self.uow.notifications.list_for_user(
                user_id, unread_only, limit, offset
            )
            unread = await self.uow.notifications.count_unread(user_id)
            return Return.ok(
                NotificationPage(
                    notifications=[NotificationItem.from_entity(n) for n in notifications],
                    unread_count=unread,
                    limit=limit,
                    offset=offset,
                )
            )


class UnreadCountUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UnreadCountResponse]:
        async with self.uow:
            unread = await self.uow.notifications.count_unread(user_id)
            return Return.ok(UnreadCountResponse(unread_count=unread))
