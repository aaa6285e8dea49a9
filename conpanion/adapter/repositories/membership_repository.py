from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.adapter.repositories.dialect import dialect_insert
from conpanion.app.repositories.membership_repository import (
    IOrganizationMembershipRepository,
    IProjectMembershipRepository,
)
from conpanion.domain.entities import (
    MembershipStatus,
    OrganizationMembership,
    OrganizationRole,
    ProjectMembership,
    ProjectRole,
)


class _MembershipRepository:
    """Shared SQLModel implementation for both membership tables"""

    model = None
    role_enum = None
    scope_column: str = ""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _scope(self):
        return getattr(self.model, self.scope_column)

    async def get(self, scope_id: UUID, user_id: UUID):
        """Get membership by scope and user, reloaded from the database"""
        stmt = (
            select(self.model)
            .where(self._scope() == scope_id, self.model.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(self, scope_id: UUID) -> List:
        stmt = select(self.model).where(
            self._scope() == scope_id,
            self.model.status == MembershipStatus.active,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, membership):
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def update(self, membership):
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def upsert_active(
        self,
        scope_id: UUID,
        user_id: UUID,
        role: str,
        invited_by: Optional[UUID],
        now: datetime,
    ):
        stmt = dialect_insert(self.session, self.model).values(
            id=uuid4(),
            user_id=user_id,
            role=self.role_enum(role),
            status=MembershipStatus.active,
            invited_by=invited_by,
            joined_at=now,
            left_at=None,
            created_at=now,
            updated_at=now,
            **{self.scope_column: scope_id},
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[self.scope_column, "user_id"],
            set_={
                "role": stmt.excluded.role,
                "status": stmt.excluded.status,
                "joined_at": stmt.excluded.joined_at,
                "left_at": None,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
        return await self.get(scope_id, user_id)


class OrganizationMembershipRepository(
    _MembershipRepository, IOrganizationMembershipRepository
):
    """Organization membership repository implementation using SQLModel"""

    model = OrganizationMembership
    role_enum = OrganizationRole
    scope_column = "organization_id"


class ProjectMembershipRepository(_MembershipRepository, IProjectMembershipRepository):
    """Project membership repository implementation using SQLModel"""

    model = ProjectMembership
    role_enum = ProjectRole
    scope_column = "project_id"
