"""
Create Organization Use Case
"""

import re
import secrets
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    MembershipStatus,
    Organization,
    OrganizationMembership,
    OrganizationRole,
)

from .dtos import OrganizationResponse


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "organization"


class CreateOrganizationUseCase:
    """
    Use case for founding an organization.

    Business Rules:
    - The founder becomes the active owner
    - Slugs are unique; a random suffix is appended on collision
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, name: str) -> Result[OrganizationResponse]:
        name = (name or "").strip()
        if not name:
            return Return.err(Error("INVALID_INPUT", "Organization name is required"))

        async with self.uow:
            slug = slugify(name)
            if await self.uow.organizations.get_by_slug(slug):
                slug = f"{slug}-{secrets.token_hex(3)}"

            organization = await self.uow.organizations.create(
                Organization(name=name, slug=slug, created_by=user_id)
            )
            now = utcnow()
            await self.uow.organization_members.create(
                OrganizationMembership(
                    organization_id=organization.id,
                    user_id=user_id,
                    role=OrganizationRole.owner,
                    status=MembershipStatus.active,
                    joined_at=now,
                )
            )
            await self.uow.commit()

            return Return.ok(
                OrganizationResponse(
                    id=str(organization.id),
                    name=organization.name,
                    slug=organization.slug,
                    role=OrganizationRole.owner.value,
                )
            )
