from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from conpanion.api.error import unwrap
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.work import (
    AddApprovalCommentUseCase,
    AddApproverUseCase,
    ApprovalActivityResponse,
    ApprovalResponseDTO,
    ChangeApprovalStatusUseCase,
    CreateApprovalUseCase,
    RespondToApprovalUseCase,
)
from conpanion.depends import get_current_user_id, get_unit_of_work
from conpanion.domain.entities.enums import ApprovalStatus, EntityKind
from conpanion.domain.entity_ref import EntityRef

router = APIRouter(prefix="/approvals", tags=["Approvals"])


class CreateApprovalRequest(BaseModel):
    approver_ids: List[UUID] = Field(..., min_length=1)
    entity_type: Optional[EntityKind] = None
    entity_id: Optional[UUID] = None
    due_date: Optional[datetime] = None


class AddApproverRequest(BaseModel):
    approver_id: UUID


class ChangeStatusRequest(BaseModel):
    status: ApprovalStatus


class ApprovalCommentRequest(BaseModel):
    comment: str = Field(..., min_length=1)


class ApprovalRespondRequest(BaseModel):
    status: ApprovalStatus
    comment: Optional[str] = None


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=ApprovalResponseDTO
)
async def create_approval(
    request: CreateApprovalRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Approval

    The requester gets a confirmation; every other approver gets an
    approval request. Priority rises as the due date gets closer.
    """
    entity = EntityRef.from_columns(request.entity_type, request.entity_id)
    result = await CreateApprovalUseCase(uow).execute(
        user_id, request.approver_ids, entity=entity, due_date=request.due_date
    )
    return unwrap(result)


@router.post("/{approval_id}/approvers", response_model=ApprovalResponseDTO)
async def add_approver(
    approval_id: UUID,
    request: AddApproverRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await AddApproverUseCase(uow).execute(
        user_id, approval_id, request.approver_id
    )
    return unwrap(result)


@router.post("/{approval_id}/status", response_model=ApprovalResponseDTO)
async def change_status(
    approval_id: UUID,
    request: ChangeStatusRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400 Bad Request: INVALID_INPUT (not pending, or target is pending)
        - 403 Forbidden: PERMISSION_DENIED (approvers only)
        - 404 Not Found: NOT_FOUND
    """
    result = await ChangeApprovalStatusUseCase(uow).execute(
        user_id, approval_id, request.status
    )
    return unwrap(result)


@router.post(
    "/{approval_id}/comments",
    status_code=status.HTTP_201_CREATED,
    response_model=ApprovalActivityResponse,
)
async def add_comment(
    approval_id: UUID,
    request: ApprovalCommentRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await AddApprovalCommentUseCase(uow).execute(
        user_id, approval_id, request.comment
    )
    return unwrap(result)


@router.post(
    "/{approval_id}/responses",
    status_code=status.HTTP_201_CREATED,
    response_model=ApprovalActivityResponse,
)
async def respond(
    approval_id: UUID,
    request: ApprovalRespondRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await RespondToApprovalUseCase(uow).execute(
        user_id, approval_id, request.status, comment=request.comment
    )
    return unwrap(result)
