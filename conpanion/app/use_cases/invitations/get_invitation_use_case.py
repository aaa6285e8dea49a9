"""
Get Invitation By Token Use Case

Public lookup used by the invitation landing page.
"""

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import InvitationStatus
from conpanion.domain.entities.invitation import TOKEN_PATTERN

from .dtos import InvitationDetails
from .scope import invitation_details


class GetInvitationByTokenUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[InvitationDetails]:
        if not token or not TOKEN_PATTERN.match(token):
            return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)
            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            if invitation.status == InvitationStatus.expired or (
                invitation.status == InvitationStatus.pending
                and invitation.is_expired(utcnow())
            ):
                return Return.err(
                    Error("INVITATION_EXPIRED", "This invitation has expired")
                )

            return Return.ok(await invitation_details(self.uow, invitation))
