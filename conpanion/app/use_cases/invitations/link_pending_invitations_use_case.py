"""
Link Pending Invitations Use Case

Runs when an account confirms its email: invitations sent to that address
before the account existed get bound to the account.
"""

from uuid import UUID

from libs.result import Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow

from .dtos import LinkInvitationsResponse


class LinkPendingInvitationsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, email: str) -> Result[LinkInvitationsResponse]:
        async with self.uow:
            linked = await self.uow.invitations.link_user(user_id, email, utcnow())
            await self.uow.commit()
            return Return.ok(LinkInvitationsResponse(linked=linked))
