"""
Task Use Cases

Task creation and edits. Each mutation publishes a domain event so assignees
hear about it.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.events import (
    EntityAssigned,
    EventBus,
    TaskCommentAdded,
    TaskMetadataChanged,
    TaskUpdated,
    default_event_bus,
)
from conpanion.app.events.handlers.tasks import TRACKED_FIELDS
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    EntityAssignee,
    EntityKind,
    Task,
    TaskComment,
    TaskMetadata,
)
from conpanion.domain.entity_ref import EntityRef

from .access import check_project_access
from .dtos import CommentResponse, TaskMetadataResponse, TaskResponse

UPDATABLE_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "project_id",
    "parent_task_id",
)


def task_snapshot(task: Task) -> Dict[str, Any]:
    return {field: getattr(task, field) for field in TRACKED_FIELDS}


class CreateTaskUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self,
        user_id: UUID,
        project_id: UUID,
        title: str,
        description: Optional[str] = None,
        status: str = "todo",
        priority: str = "medium",
        due_date: Optional[datetime] = None,
        parent_task_id: Optional[UUID] = None,
        assignee_ids: Optional[List[UUID]] = None,
    ) -> Result[TaskResponse]:
        if not (title or "").strip():
            return Return.err(Error("INVALID_INPUT", "Task title is required"))

        async with self.uow:
            error = await check_project_access(self.uow, project_id, user_id)
            if error:
                return Return.err(error)

            assignees = list(dict.fromkeys(assignee_ids or []))
            known_users = await self.uow.users.get_by_ids(assignees)
            missing = [str(a) for a in assignees if a not in known_users]
            if missing:
                return Return.err(
                    Error("NOT_FOUND", "Unknown assignees", {"user_ids": missing})
                )

            task = await self.uow.tasks.create(
                Task(
                    project_id=project_id,
                    title=title.strip(),
                    description=description,
                    status=status,
                    priority=priority,
                    due_date=due_date,
                    parent_task_id=parent_task_id,
                    created_by=user_id,
                )
            )

            for assignee_id in assignees:
                await self.uow.assignees.create(
                    EntityAssignee(
                        entity_type=EntityKind.task,
                        entity_id=task.id,
                        user_id=assignee_id,
                        assigned_by=user_id,
                    )
                )
                await self.events.publish(
                    self.uow,
                    EntityAssigned(
                        entity=EntityRef(EntityKind.task, task.id),
                        user_id=assignee_id,
                        assigned_by=user_id,
                    ),
                )

            await self.uow.commit()
            return Return.ok(TaskResponse.from_entity(task, assignees))


class UpdateTaskUseCase:
    """
    Applies field changes to a task.

    Business Rules:
    - Only the fields in UPDATABLE_FIELDS can change
    - Moving a task requires access to the target project too
    - TaskUpdated carries full before/after snapshots; handlers compute the diff
    """

    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, user_id: UUID, task_id: UUID, changes: Dict[str, Any]
    ) -> Result[TaskResponse]:
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            return Return.err(
                Error("INVALID_INPUT", f"Fields cannot be updated: {', '.join(unknown)}")
            )
        if "title" in changes and not (changes["title"] or "").strip():
            return Return.err(Error("INVALID_INPUT", "Task title is required"))

        async with self.uow:
            task = await self.uow.tasks.get_by_id(task_id)
            if task is None:
                return Return.err(Error("NOT_FOUND", "Task not found"))

            error = await check_project_access(self.uow, task.project_id, user_id)
            if error:
                return Return.err(error)
            new_project_id = changes.get("project_id")
            if new_project_id and new_project_id != task.project_id:
                error = await check_project_access(self.uow, new_project_id, user_id)
                if error:
                    return Return.err(error)
            if changes.get("parent_task_id") == task.id:
                return Return.err(
                    Error("INVALID_INPUT", "A task cannot be its own parent")
                )

            old_values = task_snapshot(task)
            for field, value in changes.items():
                setattr(task, field, value)
            task.updated_at = utcnow()
            task = await self.uow.tasks.update(task)

            await self.events.publish(
                self.uow,
                TaskUpdated(
                    task_id=task.id,
                    updated_by=user_id,
                    old_values=old_values,
                    new_values=task_snapshot(task),
                ),
            )
            await self.uow.commit()

            assignees = await self.uow.assignees.list_user_ids(EntityKind.task, task.id)
            return Return.ok(TaskResponse.from_entity(task, assignees))


class SetTaskMetadataUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, user_id: UUID, task_id: UUID, key: str, value: Optional[str]
    ) -> Result[TaskMetadataResponse]:
        key = (key or "").strip()
        if not key:
            return Return.err(Error("INVALID_INPUT", "Metadata key is required"))

        async with self.uow:
            task = await self.uow.tasks.get_by_id(task_id)
            if task is None:
                return Return.err(Error("NOT_FOUND", "Task not found"))
            error = await check_project_access(self.uow, task.project_id, user_id)
            if error:
                return Return.err(error)

            existing = await self.uow.task_metadata.get(task_id, key)
            if existing is None:
                action, old_value = "added", None
                await self.uow.task_metadata.create(
                    TaskMetadata(task_id=task_id, title=key, value=value, created_by=user_id)
                )
            elif existing.value == value:
                return Return.ok(
                    TaskMetadataResponse(
                        task_id=str(task_id), key=key, value=value, action="unchanged"
                    )
                )
            else:
                action, old_value = "updated", existing.value
                existing.value = value
                existing.updated_at = utcnow()
                await self.uow.task_metadata.update(existing)

            await self.events.publish(
                self.uow,
                TaskMetadataChanged(
                    task_id=task_id,
                    changed_by=user_id,
                    key=key,
                    action=action,
                    old_value=old_value,
                    new_value=value,
                ),
            )
            await self.uow.commit()
            return Return.ok(
                TaskMetadataResponse(task_id=str(task_id), key=key, value=value, action=action)
            )


class DeleteTaskMetadataUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, user_id: UUID, task_id: UUID, key: str
    ) -> Result[TaskMetadataResponse]:
        async with self.uow:
            task = await self.uow.tasks.get_by_id(task_id)
            if task is None:
                return Return.err(Error("NOT_FOUND", "Task not found"))
            error = await check_project_access(self.uow, task.project_id, user_id)
            if error:
                return Return.err(error)

            existing = await self.uow.task_metadata.get(task_id, key)
            if existing is None:
                return Return.err(Error("NOT_FOUND", f"No metadata named {key}"))

            await self.uow.task_metadata.delete(existing)
            await self.events.publish(
                self.uow,
                TaskMetadataChanged(
                    task_id=task_id,
                    changed_by=user_id,
                    key=key,
                    action="removed",
                    old_value=existing.value,
                ),
            )
            await self.uow.commit()
            return Return.ok(
                TaskMetadataResponse(task_id=str(task_id), key=key, action="removed")
            )


class AddTaskCommentUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, user_id: UUID, task_id: UUID, content: str
    ) -> Result[CommentResponse]:
        if not (content or "").strip():
            return Return.err(Error("INVALID_INPUT", "Comment cannot be empty"))

        async with self.uow:
            task = await self.uow.tasks.get_by_id(task_id)
            if task is None:
                return Return.err(Error("NOT_FOUND", "Task not found"))
            error = await check_project_access(self.uow, task.project_id, user_id)
            if error:
                return Return.err(error)

            comment = await self.uow.task_comments.create(
                TaskComment(task_id=task_id, user_id=user_id, content=content)
            )
            await self.events.publish(
                self.uow,
                TaskCommentAdded(
                    comment_id=comment.id,
                    task_id=task_id,
                    user_id=user_id,
                    content=content,
                ),
            )
            await self.uow.commit()
            return Return.ok(
                CommentResponse(
                    id=str(comment.id),
                    parent_id=str(task_id),
                    user_id=str(user_id),
                    content=comment.content,
                    created_at=comment.created_at.isoformat(),
                )
            )
