"""
Confirm Email Use Case

Confirms an account's email and binds invitations sent to it.
"""

import logging

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow

from .dtos import ConfirmEmailResponse
from .signup_use_case import user_info

logger = logging.getLogger(__name__)


class ConfirmEmailUseCase:
    """
    Use case for email confirmation.

    Business Rules:
    - Token is single use
    - Pending, unexpired invitations to the email are linked to the user
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[ConfirmEmailResponse]:
        if not token:
            return Return.err(Error("INVALID_INPUT", "Confirmation token is required"))

        async with self.uow:
            user = await self.uow.users.get_by_confirmation_token(token)
            if user is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or already used confirmation token")
                )

            now = utcnow()
            user.email_confirmed_at = now
            user.confirmation_token = None
            await self.uow.users.update(user)

            linked = await self.uow.invitations.link_user(user.id, user.email, now)
            await self.uow.commit()

            if linked:
                logger.info("Linked %d pending invitations to user %s", linked, user.id)
            return Return.ok(
                ConfirmEmailResponse(user=user_info(user), linked_invitations=linked)
            )
