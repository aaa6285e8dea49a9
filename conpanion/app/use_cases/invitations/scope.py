"""
Helpers shared by the invitation use cases: loading the invited scope,
checking the actor's standing in it and building public views.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from pydantic import EmailStr, TypeAdapter, ValidationError

from config import ApplicationConfig
from libs.result import Error
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import (
    Invitation,
    InvitationScope,
    MembershipStatus,
    OrganizationMembership,
    OrganizationRole,
    ProjectMembership,
    ProjectRole,
)
from conpanion.domain.entities.invitation import MAX_RESENDS_PER_WINDOW

from .dtos import InvitationDetails, InviteResponse

ADMIN_ROLES = ("owner", "admin")

SCOPE_ROLES = {
    InvitationScope.organization: OrganizationRole,
    InvitationScope.project: ProjectRole,
}

INVITATION_PATHS = {
    InvitationScope.organization: "invitation",
    InvitationScope.project: "project-invitation",
}

_email_adapter = TypeAdapter(EmailStr)

Membership = Union[OrganizationMembership, ProjectMembership]


@dataclass(frozen=True)
class ScopeContext:
    scope: InvitationScope
    scope_id: UUID
    organization_id: UUID
    organization_name: str
    name: str

    @property
    def project_id(self) -> Optional[UUID]:
        if self.scope == InvitationScope.project:
            return self.scope_id
        return None


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True


def is_valid_role(scope: InvitationScope, role: str) -> bool:
    return role in {member.value for member in SCOPE_ROLES[scope]}


def members_of(uow: UnitOfWork, scope: InvitationScope):
    if scope == InvitationScope.organization:
        return uow.organization_members
    return uow.project_members


async def load_scope(
    uow: UnitOfWork, scope: InvitationScope, scope_id: UUID
) -> Union[ScopeContext, Error]:
    """Resolve the invited organization or project, or the not-found Error"""
    if scope == InvitationScope.organization:
        organization = await uow.organizations.get_by_id(scope_id)
        if organization is None:
            return Error("ORGANIZATION_NOT_FOUND", "Organization not found")
        return ScopeContext(
            scope=scope,
            scope_id=scope_id,
            organization_id=organization.id,
            organization_name=organization.name,
            name=organization.name,
        )

    project = await uow.projects.get_by_id(scope_id)
    if project is None:
        return Error("PROJECT_NOT_FOUND", "Project not found")
    organization = await uow.organizations.get_by_id(project.organization_id)
    if organization is None:
        return Error("ORGANIZATION_NOT_FOUND", "Organization not found")
    return ScopeContext(
        scope=scope,
        scope_id=scope_id,
        organization_id=organization.id,
        organization_name=organization.name,
        name=project.name,
    )


async def active_membership(
    uow: UnitOfWork, scope: InvitationScope, scope_id: UUID, user_id: UUID
) -> Optional[Membership]:
    membership = await members_of(uow, scope).get(scope_id, user_id)
    if membership is None or membership.status != MembershipStatus.active:
        return None
    return membership


async def admin_membership(
    uow: UnitOfWork, scope: InvitationScope, scope_id: UUID, user_id: Optional[UUID]
) -> Optional[Membership]:
    """The actor's membership when they are an active owner/admin of the scope"""
    if user_id is None:
        return None
    membership = await active_membership(uow, scope, scope_id, user_id)
    if membership is None or membership.role.value not in ADMIN_ROLES:
        return None
    return membership


def invitation_url(invitation: Invitation) -> str:
    return (
        f"{ApplicationConfig.APP_BASE_URL}/"
        f"{INVITATION_PATHS[invitation.scope]}/{invitation.token}"
    )


def resend_error(invitation: Invitation, now: datetime) -> Optional[Error]:
    if invitation.is_resend_rate_limited(now):
        return Error(
            "RATE_LIMIT_EXCEEDED",
            f"Invitation can be resent at most {MAX_RESENDS_PER_WINDOW} times in 24 hours",
            {"resend_count": invitation.resend_count},
        )
    return None


def invite_response(
    invitation: Invitation,
    user_exists: bool = False,
    is_resend: bool = False,
    was_previously_member: bool = False,
) -> InviteResponse:
    return InviteResponse(
        invitation_id=str(invitation.id),
        scope=invitation.scope.value,
        scope_id=str(invitation.scope_id),
        email=invitation.email,
        role=invitation.role,
        status=invitation.status.value,
        expires_at=invitation.expires_at.isoformat(),
        invitation_url=invitation_url(invitation),
        user_exists=user_exists,
        is_resend=is_resend,
        was_previously_member=was_previously_member,
        resend_count=invitation.resend_count,
    )


async def invitation_details(
    uow: UnitOfWork, invitation: Invitation
) -> InvitationDetails:
    context = await load_scope(uow, invitation.scope, invitation.scope_id)
    inviter = (
        await uow.users.get_by_id(invitation.invited_by)
        if invitation.invited_by
        else None
    )
    scope_name = context.name if isinstance(context, ScopeContext) else ""
    organization_name = (
        context.organization_name if isinstance(context, ScopeContext) else ""
    )
    return InvitationDetails(
        invitation_id=str(invitation.id),
        scope=invitation.scope.value,
        scope_id=str(invitation.scope_id),
        scope_name=scope_name,
        organization_id=str(invitation.organization_id),
        organization_name=organization_name,
        email=invitation.email,
        role=invitation.role,
        status=invitation.status.value,
        invited_by_name=inviter.display_name if inviter else "",
        invited_at=invitation.invited_at.isoformat(),
        expires_at=invitation.expires_at.isoformat(),
    )
