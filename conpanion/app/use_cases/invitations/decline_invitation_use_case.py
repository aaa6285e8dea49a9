"""
Decline Invitation Use Case
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import InvitationStatus
from conpanion.domain.entities.invitation import TOKEN_PATTERN, normalize_email

from .dtos import InvitationStatusResponse

logger = logging.getLogger(__name__)


class DeclineInvitationUseCase:
    """
    Use case for declining an invitation.

    Business Rules:
    - Anyone holding the token may decline
    - A signed-in user must match the invitation's user or email
    - Declining frees the pending slot for a later invitation
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, token: str, user_id: Optional[UUID] = None
    ) -> Result[InvitationStatusResponse]:
        if not token or not TOKEN_PATTERN.match(token):
            return Return.err(Error("INVALID_INVITATION", "Invitation not found"))

        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_by_token(token)
                if invitation is None or invitation.status != InvitationStatus.pending:
                    return Return.err(
                        Error("INVALID_INVITATION", "Invitation is no longer valid")
                    )

                if user_id is not None:
                    user = await self.uow.users.get_by_id(user_id)
                    if invitation.user_id is not None and invitation.user_id != user_id:
                        return Return.err(
                            Error("WRONG_USER", "This invitation was sent to another account")
                        )
                    if (
                        invitation.user_id is None
                        and user is not None
                        and normalize_email(user.email) != invitation.email
                    ):
                        return Return.err(
                            Error(
                                "WRONG_EMAIL",
                                "This invitation was sent to a different email",
                            )
                        )

                now = utcnow()
                invitation.status = InvitationStatus.declined
                invitation.declined_at = now
                invitation.updated_at = now
                await self.uow.invitations.update(invitation)
                await self.uow.commit()

                logger.info("Invitation %s declined", invitation.id)
                return Return.ok(
                    InvitationStatusResponse(
                        invitation_id=str(invitation.id),
                        status=invitation.status.value,
                    )
                )
            except Exception as exc:
                logger.exception("Failed to decline invitation")
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "PROCESSING_ERROR",
                        "Failed to decline invitation",
                        {"error": str(exc)},
                    )
                )
