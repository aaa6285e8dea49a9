from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.app.repositories.work_repository import (
    IEntityAssigneeRepository,
    IFormEntryRepository,
    IFormRepository,
    ISiteDiaryRepository,
    ITaskCommentRepository,
    ITaskMetadataRepository,
    ITaskRepository,
)
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


class _RecordRepository:
    """Get/create implementation for simple records"""

    model = None

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, record_id: UUID):
        stmt = select(self.model).where(self.model.id == record_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, record):
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record


class TaskRepository(_RecordRepository, ITaskRepository):
    model = Task

    async def update(self, task: Task) -> Task:
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task


class TaskCommentRepository(_RecordRepository, ITaskCommentRepository):
    model = TaskComment


class FormRepository(_RecordRepository, IFormRepository):
    model = Form


class FormEntryRepository(_RecordRepository, IFormEntryRepository):
    model = FormEntry


class SiteDiaryRepository(_RecordRepository, ISiteDiaryRepository):
    model = SiteDiary


class TaskMetadataRepository(ITaskMetadataRepository):
    """Task metadata repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, task_id: UUID, title: str) -> Optional[TaskMetadata]:
        stmt = select(TaskMetadata).where(
            TaskMetadata.task_id == task_id, TaskMetadata.title == title
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, metadata: TaskMetadata) -> TaskMetadata:
        self.session.add(metadata)
        await self.session.flush()
        await self.session.refresh(metadata)
        return metadata

    async def update(self, metadata: TaskMetadata) -> TaskMetadata:
        self.session.add(metadata)
        await self.session.flush()
        await self.session.refresh(metadata)
        return metadata

    async def delete(self, metadata: TaskMetadata) -> None:
        await self.session.delete(metadata)
        await self.session.flush()


class EntityAssigneeRepository(IEntityAssigneeRepository):
    """Entity assignment repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(
        self, entity_type: EntityKind, entity_id: UUID, user_id: UUID
    ) -> Optional[EntityAssignee]:
        stmt = select(EntityAssignee).where(
            EntityAssignee.entity_type == entity_type,
            EntityAssignee.entity_id == entity_id,
            EntityAssignee.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_user_ids(self, entity_type: EntityKind, entity_id: UUID) -> List[UUID]:
        stmt = (
            select(EntityAssignee.user_id)
            .where(
                EntityAssignee.entity_type == entity_type,
                EntityAssignee.entity_id == entity_id,
            )
            .order_by(EntityAssignee.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, assignee: EntityAssignee) -> EntityAssignee:
        self.session.add(assignee)
        await self.session.flush()
        await self.session.refresh(assignee)
        return assignee

    async def delete(self, assignee: EntityAssignee) -> None:
        await self.session.delete(assignee)
        await self.session.flush()
