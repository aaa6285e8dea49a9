from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from conpanion.api.error import unwrap
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.work import (
    AddTaskCommentUseCase,
    AssignEntityUseCase,
    AssignmentResponse,
    CommentResponse,
    DeleteTaskMetadataUseCase,
    SetTaskMetadataUseCase,
    TaskMetadataResponse,
    TaskResponse,
    UnassignEntityUseCase,
    UpdateTaskUseCase,
)
from conpanion.depends import get_current_user_id, get_unit_of_work
from conpanion.domain.entities.enums import EntityKind
from conpanion.domain.entity_ref import EntityRef

router = APIRouter(tags=["Tasks"])


class UpdateTaskRequest(BaseModel):
    """Only the fields present in the body are changed"""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    project_id: Optional[UUID] = None
    parent_task_id: Optional[UUID] = None


class TaskMetadataRequest(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: Optional[str] = None


class CommentRequest(BaseModel):
    content: str = Field(..., min_length=1)


class AssignmentRequest(BaseModel):
    entity_type: EntityKind
    entity_id: UUID
    user_id: UUID


@router.patch("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    request: UpdateTaskRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Task

    Assignees other than the editor are told what changed. Status and due
    date changes are sent with high priority.

    Raises:
        - 400 Bad Request: INVALID_INPUT
        - 403 Forbidden: PERMISSION_DENIED
        - 404 Not Found: NOT_FOUND, PROJECT_NOT_FOUND
    """
    changes = request.model_dump(exclude_unset=True)
    return unwrap(await UpdateTaskUseCase(uow).execute(user_id, task_id, changes))


@router.put("/tasks/{task_id}/metadata", response_model=TaskMetadataResponse)
async def set_task_metadata(
    task_id: UUID,
    request: TaskMetadataRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await SetTaskMetadataUseCase(uow).execute(
        user_id, task_id, request.key, request.value
    )
    return unwrap(result)


@router.delete("/tasks/{task_id}/metadata/{key}", response_model=TaskMetadataResponse)
async def delete_task_metadata(
    task_id: UUID,
    key: str,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await DeleteTaskMetadataUseCase(uow).execute(user_id, task_id, key))


@router.post(
    "/tasks/{task_id}/comments",
    status_code=status.HTTP_201_CREATED,
    response_model=CommentResponse,
)
async def add_task_comment(
    task_id: UUID,
    request: CommentRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Add Comment

    Mentions are written as ``@[user-uuid]``; mentioned users get a
    separate high priority notification.
    """
    result = await AddTaskCommentUseCase(uow).execute(user_id, task_id, request.content)
    return unwrap(result)


@router.post(
    "/assignments",
    status_code=status.HTTP_201_CREATED,
    response_model=AssignmentResponse,
)
async def assign_entity(
    request: AssignmentRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400 Bad Request: INVALID_INPUT (kind cannot be assigned)
        - 404 Not Found: NOT_FOUND
        - 409 Conflict: ALREADY_ASSIGNED
    """
    ref = EntityRef(request.entity_type, request.entity_id)
    return unwrap(await AssignEntityUseCase(uow).execute(user_id, ref, request.user_id))


@router.delete("/assignments", response_model=AssignmentResponse)
async def unassign_entity(
    request: AssignmentRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    ref = EntityRef(request.entity_type, request.entity_id)
    return unwrap(
        await UnassignEntityUseCase(uow).execute(user_id, ref, request.user_id)
    )
