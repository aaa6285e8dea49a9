"""
Resend Invitation Use Case

Re-issues a pending invitation with a fresh token and expiry.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import InvitationStatus

from .dtos import InviteResponse
from .scope import admin_membership, invite_response, resend_error

logger = logging.getLogger(__name__)


class ResendInvitationUseCase:
    """
    Use case for resending pending invitations.

    Business Rules:
    - Only admin/owner of the invitation's scope can resend
    - Only pending invitations can be resent
    - At most 3 resends in a rolling 24 hours; the counter restarts after that
    - Each resend issues a new token and extends expiry to now + 7 days
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, invitation_id: UUID, user_id: UUID
    ) -> Result[InviteResponse]:
        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_by_id(invitation_id)
                if invitation is None:
                    return Return.err(
                        Error("INVITATION_NOT_FOUND", "Invitation not found")
                    )

                if not await admin_membership(
                    self.uow, invitation.scope, invitation.scope_id, user_id
                ):
                    return Return.err(
                        Error(
                            "PERMISSION_DENIED",
                            "Only owners and admins can resend invitations",
                        )
                    )

                if invitation.status != InvitationStatus.pending:
                    return Return.err(
                        Error(
                            "INVITATION_NOT_PENDING",
                            f"Cannot resend an invitation that is {invitation.status.value}",
                        )
                    )

                now = utcnow()
                error = resend_error(invitation, now)
                if error:
                    return Return.err(error)

                invitation.apply_resend(now)
                await self.uow.invitations.update(invitation)
                await self.uow.commit()

                logger.info(
                    "Resent invitation %s (%d in window)",
                    invitation.id,
                    invitation.resend_count,
                )
                return Return.ok(
                    invite_response(
                        invitation,
                        user_exists=invitation.user_id is not None,
                        is_resend=True,
                    )
                )
            except Exception as exc:
                logger.exception("Failed to resend invitation %s", invitation_id)
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "PROCESSING_ERROR",
                        "Failed to resend invitation",
                        {"error": str(exc)},
                    )
                )
