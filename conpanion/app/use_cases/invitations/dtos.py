"""
Invitation Use Case DTOs (Data Transfer Objects)

All Response classes for the invitation lifecycle.
"""

from typing import List, Optional

from pydantic import BaseModel


# ============================================================================
# Response DTOs
# ============================================================================


class InviteResponse(BaseModel):
    """Response for invite and resend use cases"""

    invitation_id: str
    scope: str
    scope_id: str
    email: str
    role: str
    status: str
    expires_at: str
    invitation_url: str
    user_exists: bool = False
    is_resend: bool = False
    was_previously_member: bool = False
    resend_count: int = 0


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    invitation_id: str
    scope: str
    scope_id: str
    organization_id: str
    role: str
    was_reactivated: bool
    default_project_id: Optional[str] = None


class InvitationStatusResponse(BaseModel):
    """Response for decline and cancel use cases"""

    invitation_id: str
    status: str


class InvitationDetails(BaseModel):
    """Public view of an invitation, as shown on the accept page"""

    invitation_id: str
    scope: str
    scope_id: str
    scope_name: str
    organization_id: str
    organization_name: str
    email: str
    role: str
    status: str
    invited_by_name: str
    invited_at: str
    expires_at: str


class InvitationList(BaseModel):
    invitations: List[InvitationDetails]
    total: int


class LinkInvitationsResponse(BaseModel):
    linked: int


class CleanupExpiredInvitationsResponse(BaseModel):
    expired: int
