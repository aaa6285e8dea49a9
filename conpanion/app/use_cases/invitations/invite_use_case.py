"""
Invite Use Case

Issues an organization or project invitation, or resends the pending one.
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    Invitation,
    InvitationScope,
    InvitationStatus,
    MembershipStatus,
)
from conpanion.domain.entities.invitation import INVITATION_TTL, normalize_email

from .dtos import InviteResponse
from .scope import (
    ScopeContext,
    active_membership,
    admin_membership,
    invite_response,
    is_valid_email,
    is_valid_role,
    load_scope,
    members_of,
    resend_error,
)

logger = logging.getLogger(__name__)


class InviteUseCase:
    """
    Use case for inviting a person by email to an organization or project.

    Business Rules:
    - Only active owners/admins of the scope can invite
    - Only owners can hand out the owner role
    - Active members are rejected, pending members too
    - Project invitees with an account must already belong to the organization
    - A pending, unexpired invitation for the same email is resent instead
    - A pending invitation already past expiry is expired before a new one is issued
    - Invitations expire after 7 days
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        scope: InvitationScope,
        scope_id: UUID,
        email: str,
        role: str,
        inviter_user_id: UUID,
    ) -> Result[InviteResponse]:
        """
        Execute invite use case.

        Args:
            scope: organization or project
            scope_id: Organization or project ID
            email: Email address to invite
            role: Role within the scope
            inviter_user_id: Acting user

        Returns:
            Result with InviteResponse DTO, or Error
        """
        email = normalize_email(email or "")
        if not is_valid_email(email):
            return Return.err(Error("INVALID_EMAIL", f"Invalid email address: {email}"))
        if not is_valid_role(scope, role):
            return Return.err(
                Error("INVALID_ROLE", f"Invalid role for {scope.value}: {role}")
            )

        async with self.uow:
            try:
                return await self._invite(scope, scope_id, email, role, inviter_user_id)
            except Exception as exc:
                logger.exception("Failed to invite %s to %s %s", email, scope.value, scope_id)
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "PROCESSING_ERROR",
                        "Failed to process invitation",
                        {"error": str(exc)},
                    )
                )

    async def _invite(
        self,
        scope: InvitationScope,
        scope_id: UUID,
        email: str,
        role: str,
        inviter_user_id: UUID,
    ) -> Result[InviteResponse]:
        context = await load_scope(self.uow, scope, scope_id)
        if isinstance(context, Error):
            return Return.err(context)

        inviter = await admin_membership(self.uow, scope, scope_id, inviter_user_id)
        if inviter is None:
            return Return.err(
                Error("PERMISSION_DENIED", f"Only {scope.value} owners and admins can invite")
            )
        if role == "owner" and inviter.role.value != "owner":
            return Return.err(
                Error("PERMISSION_DENIED", "Only owners can invite with the owner role")
            )

        now = utcnow()
        was_previously_member = False
        existing_user = await self.uow.users.get_by_email(email)
        if existing_user:
            membership = await members_of(self.uow, scope).get(scope_id, existing_user.id)
            if membership is not None:
                if membership.status == MembershipStatus.active:
                    return Return.err(
                        Error("ALREADY_MEMBER", f"User is already a member of this {scope.value}")
                    )
                if membership.status == MembershipStatus.pending:
                    return Return.err(
                        Error(
                            "PENDING_INVITATION",
                            f"User already has a pending membership in this {scope.value}",
                        )
                    )
                was_previously_member = True

            if scope == InvitationScope.project:
                org_membership = await active_membership(
                    self.uow,
                    InvitationScope.organization,
                    context.organization_id,
                    existing_user.id,
                )
                if org_membership is None:
                    return Return.err(
                        Error(
                            "NOT_ORGANIZATION_MEMBER",
                            "User must be a member of the organization first",
                        )
                    )

        pending = await self.uow.invitations.get_pending_for_email(scope, scope_id, email)
        if pending is not None and not pending.is_expired(now):
            error = resend_error(pending, now)
            if error:
                return Return.err(error)
            pending.apply_resend(now)
            pending.role = role
            if existing_user and pending.user_id is None:
                pending.user_id = existing_user.id
            await self.uow.invitations.update(pending)
            await self.uow.commit()

            logger.info("Resent invitation %s to %s", pending.id, email)
            return Return.ok(
                invite_response(
                    pending,
                    user_exists=existing_user is not None,
                    is_resend=True,
                    was_previously_member=was_previously_member,
                )
            )

        if pending is not None:
            pending.status = InvitationStatus.expired
            pending.updated_at = now
            await self.uow.invitations.update(pending)

        invitation = await self.uow.invitations.create(
            self._new_invitation(context, email, role, inviter_user_id, existing_user, now)
        )
        await self.uow.commit()

        logger.info("Invited %s to %s %s", email, scope.value, scope_id)
        return Return.ok(
            invite_response(
                invitation,
                user_exists=existing_user is not None,
                was_previously_member=was_previously_member,
            )
        )

    @staticmethod
    def _new_invitation(
        context: ScopeContext, email, role, inviter_user_id, existing_user, now
    ) -> Invitation:
        return Invitation(
            scope=context.scope,
            scope_id=context.scope_id,
            organization_id=context.organization_id,
            project_id=context.project_id,
            email=email,
            user_id=existing_user.id if existing_user else None,
            role=role,
            invited_by=inviter_user_id,
            invited_at=now,
            expires_at=now + INVITATION_TTL,
            updated_at=now,
        )
