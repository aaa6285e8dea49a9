from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from conpanion.domain.entities import OrganizationMembership, ProjectMembership

M = TypeVar("M")


class IMembershipRepository(ABC, Generic[M]):
    """Membership repository interface, shared by both scopes"""

    @abstractmethod
    async def get(self, scope_id: UUID, user_id: UUID) -> Optional[M]:
        """Get membership by scope and user"""
        pass

    @abstractmethod
    async def list_active(self, scope_id: UUID) -> List[M]:
        """Get active memberships of a scope"""
        pass

    @abstractmethod
    async def create(self, membership: M) -> M:
        """Create a new membership"""
        pass

    @abstractmethod
    async def update(self, membership: M) -> M:
        """Update existing membership"""
        pass

    @abstractmethod
    async def upsert_active(
        self,
        scope_id: UUID,
        user_id: UUID,
        role: str,
        invited_by: Optional[UUID],
        now: datetime,
    ) -> M:
        """
        Insert an active membership or reactivate the existing row.

        Runs as a single INSERT ... ON CONFLICT DO UPDATE on (scope, user).
        """
        pass


class IOrganizationMembershipRepository(IMembershipRepository[OrganizationMembership]):
    """Organization membership repository interface"""


class IProjectMembershipRepository(IMembershipRepository[ProjectMembership]):
    """Project membership repository interface"""
