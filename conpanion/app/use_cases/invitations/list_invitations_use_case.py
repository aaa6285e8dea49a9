"""
List Invitations Use Cases

Pending invitations for the signed-in user, and for a scope's admins.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import InvitationScope

from .dtos import InvitationList
from .scope import admin_membership, invitation_details, load_scope


class ListUserPendingInvitationsUseCase:
    """Pending, unexpired invitations linked to the user or sent to their email"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[InvitationList]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("AUTH_REQUIRED", "Sign in to see invitations"))

            invitations = await self.uow.invitations.list_pending_for_user(
                user.id, user.email, utcnow()
            )
            details = [await invitation_details(self.uow, i) for i in invitations]
            return Return.ok(InvitationList(invitations=details, total=len(details)))


class ListPendingInvitationsUseCase:
    """Pending, unexpired invitations of an organization or project (admins only)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, scope: InvitationScope, scope_id: UUID, user_id: UUID
    ) -> Result[InvitationList]:
        async with self.uow:
            context = await load_scope(self.uow, scope, scope_id)
            if isinstance(context, Error):
                return Return.err(context)

            if not await admin_membership(self.uow, scope, scope_id, user_id):
                return Return.err(
                    Error(
                        "PERMISSION_DENIED",
                        f"Only {scope.value} owners and admins can list invitations",
                    )
                )

            invitations = await self.uow.invitations.list_pending_for_scope(
                scope, scope_id, utcnow()
            )
            details = [await invitation_details(self.uow, i) for i in invitations]
            return Return.ok(InvitationList(invitations=details, total=len(details)))
