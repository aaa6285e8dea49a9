"""
Accept Invitation Use Case

Turns a pending invitation into an active membership for the signed-in user.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from conpanion.app.events import EventBus, MembershipCreated, default_event_bus
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    InvitationScope,
    InvitationStatus,
    MembershipStatus,
    ProjectRole,
)
from conpanion.domain.entities.invitation import TOKEN_PATTERN, normalize_email

from .dtos import AcceptInvitationResponse
from .scope import ADMIN_ROLES, active_membership, members_of

logger = logging.getLogger(__name__)


class AcceptInvitationUseCase:
    """
    Use case for accepting organization and project invitations.

    Business Rules:
    - The invitee must be signed in
    - An invitation bound to a user can only be accepted by that user
    - An unbound invitation can only be accepted by a matching email
    - Existing active members get ALREADY_MEMBER; a pending invitation is closed
    - Expired or already handled invitations are rejected
    - The membership row is upserted, so a deactivated member is reactivated in place
    - Organization members are also added to the default project
    """

    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, token: str, user_id: Optional[UUID]
    ) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            token: Invitation token from the accept URL
            user_id: Signed-in user, None when anonymous

        Returns:
            Result with AcceptInvitationResponse DTO, or Error
        """
        if user_id is None:
            return Return.err(
                Error("AUTH_REQUIRED", "Sign in to accept the invitation")
            )
        if not token or not TOKEN_PATTERN.match(token):
            return Return.err(Error("INVALID_INPUT", "Malformed invitation token"))

        async with self.uow:
            try:
                return await self._accept(token, user_id)
            except IntegrityError:
                logger.warning("Membership conflict accepting invitation for %s", user_id)
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "MEMBERSHIP_CONFLICT",
                        "Membership was changed concurrently, try again",
                    )
                )
            except Exception as exc:
                logger.exception("Failed to accept invitation for user %s", user_id)
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "PROCESSING_ERROR",
                        "Failed to accept invitation",
                        {"error": str(exc)},
                    )
                )

    async def _accept(
        self, token: str, user_id: UUID
    ) -> Result[AcceptInvitationResponse]:
        user = await self.uow.users.get_by_id(user_id)
        if user is None:
            return Return.err(Error("AUTH_REQUIRED", "Sign in to accept the invitation"))

        invitation = await self.uow.invitations.get_by_token(token)
        if invitation is None:
            return Return.err(Error("INVALID_INVITATION", "Invitation not found"))

        if invitation.user_id is not None and invitation.user_id != user.id:
            return Return.err(
                Error("WRONG_USER", "This invitation was sent to another account")
            )
        if invitation.user_id is None and normalize_email(user.email) != invitation.email:
            return Return.err(
                Error("WRONG_EMAIL", "This invitation was sent to a different email")
            )

        now = utcnow()
        scope, scope_id = invitation.scope, invitation.scope_id

        if await active_membership(self.uow, scope, scope_id, user.id):
            if invitation.is_acceptable(now):
                invitation.status = InvitationStatus.accepted
                invitation.accepted_at = now
                invitation.updated_at = now
                await self.uow.invitations.update(invitation)
                await self.uow.commit()
            return Return.err(
                Error("ALREADY_MEMBER", f"You are already a member of this {scope.value}")
            )

        if not invitation.is_acceptable(now):
            return Return.err(
                Error("INVALID_INVITATION", "Invitation is no longer valid")
            )

        previous = await members_of(self.uow, scope).get(scope_id, user.id)
        was_reactivated = (
            previous is not None and previous.status == MembershipStatus.deactivated
        )

        await members_of(self.uow, scope).upsert_active(
            scope_id, user.id, invitation.role, invitation.invited_by, now
        )

        invitation.status = InvitationStatus.accepted
        invitation.accepted_at = now
        invitation.updated_at = now
        if invitation.user_id is None:
            invitation.user_id = user.id
        await self.uow.invitations.update(invitation)

        default_project_id = None
        if scope == InvitationScope.organization:
            default_project_id = await self._join_default_project(
                scope_id, user.id, invitation.role, invitation.invited_by, now
            )

        await self.events.publish(
            self.uow,
            MembershipCreated(
                scope=scope,
                scope_id=scope_id,
                user_id=user.id,
                role=invitation.role,
                added_by=invitation.invited_by,
            ),
        )
        await self.uow.commit()

        logger.info(
            "User %s joined %s %s (reactivated=%s)",
            user.id,
            scope.value,
            scope_id,
            was_reactivated,
        )
        return Return.ok(
            AcceptInvitationResponse(
                invitation_id=str(invitation.id),
                scope=scope.value,
                scope_id=str(scope_id),
                organization_id=str(invitation.organization_id),
                role=invitation.role,
                was_reactivated=was_reactivated,
                default_project_id=str(default_project_id) if default_project_id else None,
            )
        )

    async def _join_default_project(
        self, organization_id: UUID, user_id: UUID, org_role: str, invited_by, now
    ) -> Optional[UUID]:
        project = await self.uow.projects.get_default_for_organization(organization_id)
        if project is None:
            return None
        if await active_membership(
            self.uow, InvitationScope.project, project.id, user_id
        ):
            return project.id

        role = ProjectRole.admin if org_role in ADMIN_ROLES else ProjectRole.member
        await self.uow.project_members.upsert_active(
            project.id, user_id, role.value, invited_by, now
        )
        return project.id
