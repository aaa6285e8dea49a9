"""
Cancel Invitation Use Case
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork

from .dtos import InvitationStatusResponse
from .scope import admin_membership

logger = logging.getLogger(__name__)


class CancelInvitationUseCase:
    """
    Use case for cancelling (deleting) an invitation.

    Business Rules:
    - Only owner/admin of the invitation's scope can cancel
    - The row is removed, so re-inviting starts with a fresh resend counter
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, invitation_id: UUID, user_id: UUID
    ) -> Result[InvitationStatusResponse]:
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
                            "Only owners and admins can cancel invitations",
                        )
                    )

                await self.uow.invitations.delete(invitation)
                await self.uow.commit()

                logger.info("Invitation %s cancelled by %s", invitation_id, user_id)
                return Return.ok(
                    InvitationStatusResponse(
                        invitation_id=str(invitation_id), status="cancelled"
                    )
                )
            except Exception as exc:
                logger.exception("Failed to cancel invitation %s", invitation_id)
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "PROCESSING_ERROR",
                        "Failed to cancel invitation",
                        {"error": str(exc)},
                    )
                )
