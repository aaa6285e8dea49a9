"""
Cleanup Expired Invitations Use Case

Scheduled sweep flipping overdue pending invitations to expired.
"""

import logging

from libs.result import Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow

from .dtos import CleanupExpiredInvitationsResponse

logger = logging.getLogger(__name__)


class CleanupExpiredInvitationsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[CleanupExpiredInvitationsResponse]:
        async with self.uow:
            expired = await self.uow.invitations.expire_overdue(utcnow())
            await self.uow.commit()

        if expired:
            logger.info("Expired %d overdue invitations", expired)
        return Return.ok(CleanupExpiredInvitationsResponse(expired=expired))
