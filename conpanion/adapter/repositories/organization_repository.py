from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.app.repositories.organization_repository import (
    IOrganizationRepository,
    IProjectRepository,
)
from conpanion.domain.entities import Organization, Project


class OrganizationRepository(IOrganizationRepository):
    """Organization repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        stmt = select(Organization).where(Organization.id == organization_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Organization]:
        stmt = select(Organization).where(Organization.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, organization: Organization) -> Organization:
        self.session.add(organization)
        await self.session.flush()
        await self.session.refresh(organization)
        return organization


class ProjectRepository(IProjectRepository):
    """Project repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        stmt = select(Project).where(Project.id == project_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_organization(self, organization_id: UUID) -> List[Project]:
        stmt = (
            select(Project)
            .where(Project.organization_id == organization_id)
            .order_by(Project.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_default_for_organization(
        self, organization_id: UUID
    ) -> Optional[Project]:
        """First project named like default/main, else the oldest project"""
        named = (
            select(Project)
            .where(
                Project.organization_id == organization_id,
                or_(
                    Project.name.ilike("%default%"),
                    Project.name.ilike("%main%"),
                ),
            )
            .order_by(Project.created_at)
            .limit(1)
        )
        result = await self.session.execute(named)
        project = result.scalar_one_or_none()
        if project is not None:
            return project

        oldest = (
            select(Project)
            .where(Project.organization_id == organization_id)
            .order_by(Project.created_at)
            .limit(1)
        )
        result = await self.session.execute(oldest)
        return result.scalar_one_or_none()

    async def create(self, project: Project) -> Project:
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project
