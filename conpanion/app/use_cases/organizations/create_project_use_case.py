"""
Create Project Use Case
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.invitations.scope import admin_membership
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    InvitationScope,
    MembershipStatus,
    Project,
    ProjectMembership,
    ProjectRole,
)

from .dtos import ProjectResponse


class CreateProjectUseCase:
    """
    Use case for creating a project inside an organization.

    Business Rules:
    - Only organization owners/admins can create projects
    - The creator becomes the project owner
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        organization_id: UUID,
        name: str,
        description: Optional[str] = None,
    ) -> Result[ProjectResponse]:
        name = (name or "").strip()
        if not name:
            return Return.err(Error("INVALID_INPUT", "Project name is required"))

        async with self.uow:
            organization = await self.uow.organizations.get_by_id(organization_id)
            if organization is None:
                return Return.err(
                    Error("ORGANIZATION_NOT_FOUND", "Organization not found")
                )

            if not await admin_membership(
                self.uow, InvitationScope.organization, organization_id, user_id
            ):
                return Return.err(
                    Error(
                        "PERMISSION_DENIED",
                        "Only organization owners and admins can create projects",
                    )
                )

            project = await self.uow.projects.create(
                Project(
                    organization_id=organization_id,
                    name=name,
                    description=description,
                    created_by=user_id,
                )
            )
            await self.uow.project_members.create(
                ProjectMembership(
                    project_id=project.id,
                    user_id=user_id,
                    role=ProjectRole.owner,
                    status=MembershipStatus.active,
                    joined_at=utcnow(),
                )
            )
            await self.uow.commit()

            return Return.ok(
                ProjectResponse(
                    id=str(project.id),
                    organization_id=str(organization_id),
                    name=project.name,
                    description=project.description,
                    role=ProjectRole.owner.value,
                )
            )
