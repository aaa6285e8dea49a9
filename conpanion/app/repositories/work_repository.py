from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from conpanion.domain.entities import (
    EntityAssignee,
    EntityKind,
    Form,
    FormEntry,
    SiteDiary,
    Task,
    TaskComment,
    TaskMetadata,
)

R = TypeVar("R")


class IRecordRepository(ABC, Generic[R]):
    """Get/create access for simple project-owned records"""

    @abstractmethod
    async def get_by_id(self, record_id: UUID) -> Optional[R]:
        """Get record by ID"""
        pass

    @abstractmethod
    async def create(self, record: R) -> R:
        """Create a new record"""
        pass


class ITaskRepository(IRecordRepository[Task]):
    """Task repository interface"""

    @abstractmethod
    async def update(self, task: Task) -> Task:
        """Update existing task"""
        pass


class ITaskCommentRepository(IRecordRepository[TaskComment]):
    """Task comment repository interface"""


class IFormRepository(IRecordRepository[Form]):
    """Form repository interface"""


class IFormEntryRepository(IRecordRepository[FormEntry]):
    """Form entry repository interface"""


class ISiteDiaryRepository(IRecordRepository[SiteDiary]):
    """Site diary repository interface"""


class ITaskMetadataRepository(ABC):
    """Task metadata repository interface"""

    @abstractmethod
    async def get(self, task_id: UUID, title: str) -> Optional[TaskMetadata]:
        """Get a metadata entry by key"""
        pass

    @abstractmethod
    async def create(self, metadata: TaskMetadata) -> TaskMetadata:
        """Create a metadata entry"""
        pass

    @abstractmethod
    async def update(self, metadata: TaskMetadata) -> TaskMetadata:
        """Update a metadata entry"""
        pass

    @abstractmethod
    async def delete(self, metadata: TaskMetadata) -> None:
        """Delete a metadata entry"""
        pass


class IEntityAssigneeRepository(ABC):
    """Entity assignment repository interface"""

    @abstractmethod
    async def get(
        self, entity_type: EntityKind, entity_id: UUID, user_id: UUID
    ) -> Optional[EntityAssignee]:
        """Get one assignment"""
        pass

    @abstractmethod
    async def list_user_ids(self, entity_type: EntityKind, entity_id: UUID) -> List[UUID]:
        """Get the users assigned to an entity"""
        pass

    @abstractmethod
    async def create(self, assignee: EntityAssignee) -> EntityAssignee:
        """Create an assignment"""
        pass

    @abstractmethod
    async def delete(self, assignee: EntityAssignee) -> None:
        """Remove an assignment"""
        pass
