from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from conpanion.api.error import unwrap
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.invitations import (
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    CancelInvitationUseCase,
    DeclineInvitationUseCase,
    GetInvitationByTokenUseCase,
    InvitationDetails,
    InvitationList,
    InvitationStatusResponse,
    InviteResponse,
    ListUserPendingInvitationsUseCase,
    ResendInvitationUseCase,
)
from conpanion.depends import get_current_user_id, get_optional_user_id, get_unit_of_work

router = APIRouter(prefix="/invitations", tags=["Invitations"])


class InviteRequest(BaseModel):
    """
    Invite HTTP request payload

    Shared by the organization and project invitation endpoints. Email and
    role are validated by the use case so that bad values surface as
    INVALID_EMAIL / INVALID_ROLE rather than a 422.
    """

    email: str = Field(..., description="Invitee email address")
    role: str = Field("member", description="Role granted on acceptance")


@router.get("/mine", response_model=InvitationList)
async def list_my_invitations(
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Pending, unexpired invitations addressed to the signed-in user"""
    return unwrap(await ListUserPendingInvitationsUseCase(uow).execute(user_id))


@router.get("/{token}", response_model=InvitationDetails)
async def get_invitation(token: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Invitation details for the accept page. No authentication required.

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 410 Gone: INVITATION_EXPIRED
    """
    return unwrap(await GetInvitationByTokenUseCase(uow).execute(token))


@router.post(
    "/{token}/accept",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    token: str,
    user_id: Optional[UUID] = Depends(get_optional_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Accept Invitation

    The signed-in user joins the organization or project the invitation
    grants, reactivating a previous membership when there is one.

    Raises:
        - 401 Unauthorized: AUTH_REQUIRED
        - 403 Forbidden: WRONG_USER, WRONG_EMAIL, NOT_ORGANIZATION_MEMBER
        - 404 Not Found: INVALID_INVITATION
        - 409 Conflict: ALREADY_MEMBER, MEMBERSHIP_CONFLICT
        - 410 Gone: INVITATION_EXPIRED
        - 500 Internal Server Error: PROCESSING_ERROR
    """
    return unwrap(await AcceptInvitationUseCase(uow).execute(token, user_id))


@router.post("/{token}/decline", response_model=InvitationStatusResponse)
async def decline_invitation(
    token: str,
    user_id: Optional[UUID] = Depends(get_optional_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 403 Forbidden: WRONG_USER
        - 404 Not Found: INVALID_INVITATION
    """
    return unwrap(await DeclineInvitationUseCase(uow).execute(token, user_id))


@router.post("/{invitation_id}/resend", response_model=InviteResponse)
async def resend_invitation(
    invitation_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Resend Invitation

    Extends the expiry and bumps the resend counter. Limited to three
    resends per day.

    Raises:
        - 403 Forbidden: PERMISSION_DENIED
        - 404 Not Found: INVITATION_NOT_FOUND
        - 429 Too Many Requests: RATE_LIMIT_EXCEEDED
    """
    return unwrap(await ResendInvitationUseCase(uow).execute(invitation_id, user_id))


@router.delete("/{invitation_id}", response_model=InvitationStatusResponse)
async def cancel_invitation(
    invitation_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 403 Forbidden: PERMISSION_DENIED
        - 404 Not Found: INVITATION_NOT_FOUND
    """
    return unwrap(await CancelInvitationUseCase(uow).execute(invitation_id, user_id))
