"""
Add Project Member Use Case

Directly adds an organization member to a project, without an invitation.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.events import EventBus, MembershipCreated, default_event_bus
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.invitations.scope import (
    active_membership,
    admin_membership,
    is_valid_role,
)
from conpanion.domain.base import utcnow
from conpanion.domain.entities import InvitationScope, MembershipStatus

from .dtos import MembershipResponse

logger = logging.getLogger(__name__)


class AddProjectMemberUseCase:
    """
    Use case for adding a member to a project.

    Business Rules:
    - Only project owners/admins can add members
    - The user must be an active member of the project's organization
    - A deactivated project member is reactivated in place
    - The new member is notified unless they added themselves
    """

    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, actor_id: UUID, project_id: UUID, user_id: UUID, role: str = "member"
    ) -> Result[MembershipResponse]:
        if not is_valid_role(InvitationScope.project, role):
            return Return.err(Error("INVALID_ROLE", f"Invalid project role: {role}"))

        async with self.uow:
            project = await self.uow.projects.get_by_id(project_id)
            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            if not await admin_membership(
                self.uow, InvitationScope.project, project_id, actor_id
            ):
                return Return.err(
                    Error(
                        "PERMISSION_DENIED",
                        "Only project owners and admins can add members",
                    )
                )

            if not await active_membership(
                self.uow, InvitationScope.organization, project.organization_id, user_id
            ):
                return Return.err(
                    Error(
                        "NOT_ORGANIZATION_MEMBER",
                        "User must be a member of the organization first",
                    )
                )

            existing = await self.uow.project_members.get(project_id, user_id)
            if existing is not None and existing.status == MembershipStatus.active:
                return Return.err(
                    Error("ALREADY_MEMBER", "User is already a member of this project")
                )
            was_reactivated = (
                existing is not None and existing.status == MembershipStatus.deactivated
            )

            membership = await self.uow.project_members.upsert_active(
                project_id, user_id, role, actor_id, utcnow()
            )
            await self.events.publish(
                self.uow,
                MembershipCreated(
                    scope=InvitationScope.project,
                    scope_id=project_id,
                    user_id=user_id,
                    role=role,
                    added_by=actor_id,
                ),
            )
            await self.uow.commit()

            logger.info("User %s added to project %s by %s", user_id, project_id, actor_id)
            return Return.ok(
                MembershipResponse(
                    scope=InvitationScope.project.value,
                    scope_id=str(project_id),
                    user_id=str(user_id),
                    role=membership.role.value,
                    status=membership.status.value,
                    was_reactivated=was_reactivated,
                )
            )
