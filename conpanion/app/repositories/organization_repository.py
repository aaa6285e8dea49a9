from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from conpanion.domain.entities import Organization, Project


class IOrganizationRepository(ABC):
    """Organization repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        """Get organization by ID"""
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Organization]:
        """Get organization by slug"""
        pass

    @abstractmethod
    async def create(self, organization: Organization) -> Organization:
        """Create a new organization"""
        pass


class IProjectRepository(ABC):
    """Project repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """Get project by ID"""
        pass

    @abstractmethod
    async def list_by_organization(self, organization_id: UUID) -> List[Project]:
        """Get all projects of an organization, oldest first"""
        pass

    @abstractmethod
    async def get_default_for_organization(
        self, organization_id: UUID
    ) -> Optional[Project]:
        """Get the project new organization members land in"""
        pass

    @abstractmethod
    async def create(self, project: Project) -> Project:
        """Create a new project"""
        pass
