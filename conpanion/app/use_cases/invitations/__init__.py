"""
Invitation Use Cases

Lifecycle of organization and project invitations.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .cancel_invitation_use_case import CancelInvitationUseCase
from .cleanup_expired_invitations_use_case import CleanupExpiredInvitationsUseCase
from .decline_invitation_use_case import DeclineInvitationUseCase
from .dtos import (
    AcceptInvitationResponse,
    CleanupExpiredInvitationsResponse,
    InvitationDetails,
    InvitationList,
    InvitationStatusResponse,
    InviteResponse,
    LinkInvitationsResponse,
)
from .get_invitation_use_case import GetInvitationByTokenUseCase
from .invite_use_case import InviteUseCase
from .link_pending_invitations_use_case import LinkPendingInvitationsUseCase
from .list_invitations_use_case import (
    ListPendingInvitationsUseCase,
    ListUserPendingInvitationsUseCase,
)
from .resend_invitation_use_case import ResendInvitationUseCase

__all__ = [
    "InviteUseCase",
    "ResendInvitationUseCase",
    "AcceptInvitationUseCase",
    "DeclineInvitationUseCase",
    "CancelInvitationUseCase",
    "LinkPendingInvitationsUseCase",
    "GetInvitationByTokenUseCase",
    "ListUserPendingInvitationsUseCase",
    "ListPendingInvitationsUseCase",
    "CleanupExpiredInvitationsUseCase",
    "InviteResponse",
    "AcceptInvitationResponse",
    "InvitationStatusResponse",
    "InvitationDetails",
    "InvitationList",
    "LinkInvitationsResponse",
    "CleanupExpiredInvitationsResponse",
]
