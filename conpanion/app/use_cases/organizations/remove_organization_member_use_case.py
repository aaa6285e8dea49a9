"""
Remove Organization Member Use Case

Deactivates (soft deletes) a member. The row stays so a later invitation
reactivates it in place.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import MembershipStatus, OrganizationRole

from .dtos import MembershipResponse


class RemoveOrganizationMemberUseCase:
    """
    Use case for removing members from an organization.

    Business Rules:
    - Only owner/admin can remove members
    - Admins cannot remove owners
    - The last owner cannot remove themselves
    - Removal sets status=deactivated and left_at
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, requester_user_id: UUID, organization_id: UUID, target_user_id: UUID
    ) -> Result[MembershipResponse]:
        async with self.uow:
            requester = await self.uow.organization_members.get(
                organization_id, requester_user_id
            )
            if requester is None or requester.status != MembershipStatus.active:
                return Return.err(
                    Error("PERMISSION_DENIED", "You are not a member of this organization")
                )
            if requester.role not in (OrganizationRole.owner, OrganizationRole.admin):
                return Return.err(
                    Error("PERMISSION_DENIED", "Only owners and admins can remove members")
                )

            target = await self.uow.organization_members.get(
                organization_id, target_user_id
            )
            if target is None or target.status != MembershipStatus.active:
                return Return.err(
                    Error("NOT_FOUND", "User is not an active member of this organization")
                )

            if (
                requester.role == OrganizationRole.admin
                and target.role == OrganizationRole.owner
            ):
                return Return.err(
                    Error("PERMISSION_DENIED", "Admins cannot remove owners")
                )

            if target.role == OrganizationRole.owner:
                members = await self.uow.organization_members.list_active(organization_id)
                owners = [m for m in members if m.role == OrganizationRole.owner]
                if len(owners) == 1:
                    return Return.err(
                        Error(
                            "PERMISSION_DENIED",
                            "Cannot remove the last owner of an organization",
                        )
                    )

            now = utcnow()
            target.status = MembershipStatus.deactivated
            target.left_at = now
            target.updated_at = now
            await self.uow.organization_members.update(target)
            await self.uow.commit()

            return Return.ok(
                MembershipResponse(
                    scope="organization",
                    scope_id=str(organization_id),
                    user_id=str(target_user_id),
                    role=target.role.value,
                    status=target.status.value,
                )
            )
