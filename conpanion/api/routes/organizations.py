from typing import Optional
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
    CreateOrganizationUseCase,
    CreateProjectUseCase,
    MembershipResponse,
    OrganizationResponse,
    ProjectResponse,
    RemoveOrganizationMemberUseCase,
)
from conpanion.depends import get_current_user_id, get_unit_of_work
from conpanion.domain.entities.enums import InvitationScope

router = APIRouter(prefix="/organizations", tags=["Organizations"])


class CreateOrganizationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class CreateProjectRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=OrganizationResponse
)
async def create_organization(
    request: CreateOrganizationRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Create an organization owned by the caller"""
    return unwrap(await CreateOrganizationUseCase(uow).execute(user_id, request.name))


@router.post(
    "/{organization_id}/projects",
    status_code=status.HTTP_201_CREATED,
    response_model=ProjectResponse,
)
async def create_project(
    organization_id: UUID,
    request: CreateProjectRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 403 Forbidden: PERMISSION_DENIED (owner/admin only)
        - 404 Not Found: ORGANIZATION_NOT_FOUND
    """
    result = await CreateProjectUseCase(uow).execute(
        user_id, organization_id, request.name, request.description
    )
    return unwrap(result)


@router.delete(
    "/{organization_id}/members/{member_user_id}", response_model=MembershipResponse
)
async def remove_member(
    organization_id: UUID,
    member_user_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Remove Member

    Deactivates the membership; the row is kept so a later invitation
    reactivates it.

    Raises:
        - 403 Forbidden: PERMISSION_DENIED
        - 404 Not Found: NOT_FOUND, ORGANIZATION_NOT_FOUND
    """
    result = await RemoveOrganizationMemberUseCase(uow).execute(
        user_id, organization_id, member_user_id
    )
    return unwrap(result)


@router.post(
    "/{organization_id}/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=InviteResponse,
)
async def invite_to_organization(
    organization_id: UUID,
    request: InviteRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Invite to Organization

    Creates a pending invitation, or refreshes the existing one for the
    same email.

    Raises:
        - 400 Bad Request: INVALID_EMAIL, INVALID_ROLE
        - 403 Forbidden: PERMISSION_DENIED
        - 404 Not Found: ORGANIZATION_NOT_FOUND
        - 409 Conflict: ALREADY_MEMBER
        - 429 Too Many Requests: RATE_LIMIT_EXCEEDED
    """
    result = await InviteUseCase(uow).execute(
        InvitationScope.organization,
        organization_id,
        request.email,
        request.role,
        user_id,
    )
    return unwrap(result)


@router.get("/{organization_id}/invitations", response_model=InvitationList)
async def list_organization_invitations(
    organization_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListPendingInvitationsUseCase(uow).execute(
        InvitationScope.organization, organization_id, user_id
    )
    return unwrap(result)
