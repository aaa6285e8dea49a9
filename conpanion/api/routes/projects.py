from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from conpanion.api.error import unwrap
from conpanion.api.routes.invitation import InviteRequest
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.invitations import (
    InvitationList,
    InviteResponse,
    InviteUseCase,
    ListPendingInvitationsUseCase,
)
from conpanion.app.use_cases.organizations import (
    AddProjectMemberUseCase,
    MembershipResponse,
)
from conpanion.app.use_cases.work import (
    CreateFormUseCase,
    CreateTaskUseCase,
    FormResponse,
    TaskResponse,
)
from conpanion.depends import get_current_user_id, get_unit_of_work
from conpanion.domain.entities.enums import InvitationScope

router = APIRouter(prefix="/projects", tags=["Projects"])


class AddProjectMemberRequest(BaseModel):
    user_id: UUID
    role: str = "member"


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: str = "todo"
    priority: str = "medium"
    due_date: Optional[datetime] = None
    parent_task_id: Optional[UUID] = None
    assignee_ids: List[UUID] = []


class CreateFormRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    assignee_ids: List[UUID] = []


@router.post(
    "/{project_id}/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=InviteResponse,
)
async def invite_to_project(
    project_id: UUID,
    request: InviteRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Invite to Project

    The invitee must already belong to the project's organization by the
    time they accept.

    Raises:
        - 400 Bad Request: INVALID_EMAIL, INVALID_ROLE
        - 403 Forbidden: PERMISSION_DENIED
        - 404 Not Found: PROJECT_NOT_FOUND
        - 409 Conflict: ALREADY_MEMBER
        - 429 Too Many Requests: RATE_LIMIT_EXCEEDED
    """
    result = await InviteUseCase(uow).execute(
        InvitationScope.project, project_id, request.email, request.role, user_id
    )
    return unwrap(result)


@router.get("/{project_id}/invitations", response_model=InvitationList)
async def list_project_invitations(
    project_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListPendingInvitationsUseCase(uow).execute(
        InvitationScope.project, project_id, user_id
    )
    return unwrap(result)


@router.post(
    "/{project_id}/members",
    status_code=status.HTTP_201_CREATED,
    response_model=MembershipResponse,
)
async def add_project_member(
    project_id: UUID,
    request: AddProjectMemberRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Direct add, without an invitation. The new member is notified."""
    result = await AddProjectMemberUseCase(uow).execute(
        user_id, project_id, request.user_id, request.role
    )
    return unwrap(result)


@router.post(
    "/{project_id}/tasks",
    status_code=status.HTTP_201_CREATED,
    response_model=TaskResponse,
)
async def create_task(
    project_id: UUID,
    request: CreateTaskRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await CreateTaskUseCase(uow).execute(
        user_id,
        project_id,
        request.title,
        description=request.description,
        status=request.status,
        priority=request.priority,
        due_date=request.due_date,
        parent_task_id=request.parent_task_id,
        assignee_ids=request.assignee_ids,
    )
    return unwrap(result)


@router.post(
    "/{project_id}/forms",
    status_code=status.HTTP_201_CREATED,
    response_model=FormResponse,
)
async def create_form(
    project_id: UUID,
    request: CreateFormRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await CreateFormUseCase(uow).execute(
        user_id, project_id, request.name, request.assignee_ids
    )
    return unwrap(result)
