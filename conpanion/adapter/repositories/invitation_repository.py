from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.app.repositories.invitation_repository import IInvitationRepository
from conpanion.domain.entities import Invitation, InvitationScope, InvitationStatus
from conpanion.domain.entities.invitation import normalize_email


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = select(Invitation).where(Invitation.id == invitation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        stmt = select(Invitation).where(Invitation.token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_for_email(
        self, scope: InvitationScope, scope_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get the pending invitation for (scope, email), expired or not"""
        stmt = select(Invitation).where(
            Invitation.scope == scope,
            Invitation.scope_id == scope_id,
            Invitation.email == normalize_email(email),
            Invitation.status == InvitationStatus.pending,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_pending_for_scope(
        self, scope: InvitationScope, scope_id: UUID, now: datetime
    ) -> List[Invitation]:
        """Get pending, unexpired invitations of a scope"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.scope == scope,
                Invitation.scope_id == scope_id,
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at > now,
            )
            .order_by(Invitation.invited_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_pending_for_user(
        self, user_id: UUID, email: str, now: datetime
    ) -> List[Invitation]:
        """Get pending, unexpired invitations linked to the user or their email"""
        stmt = (
            select(Invitation)
            .where(
                or_(
                    Invitation.user_id == user_id,
                    Invitation.email == normalize_email(email),
                ),
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at > now,
            )
            .order_by(Invitation.invited_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def delete(self, invitation: Invitation) -> None:
        """Delete an invitation"""
        await self.session.delete(invitation)
        await self.session.flush()

    async def link_user(self, user_id: UUID, email: str, now: datetime) -> int:
        """Attach user_id to unlinked pending invitations for email"""
        stmt = select(Invitation).where(
            Invitation.email == normalize_email(email),
            Invitation.status == InvitationStatus.pending,
            Invitation.expires_at > now,
            Invitation.user_id.is_(None),
        )
        result = await self.session.execute(stmt)
        invitations = list(result.scalars().all())
        for invitation in invitations:
            invitation.user_id = user_id
            invitation.updated_at = now
            self.session.add(invitation)
        await self.session.flush()
        return len(invitations)

    async def expire_overdue(self, now: datetime) -> int:
        """Flip pending invitations past expiry to expired"""
        stmt = select(Invitation).where(
            Invitation.status == InvitationStatus.pending,
            Invitation.expires_at <= now,
        )
        result = await self.session.execute(stmt)
        invitations = list(result.scalars().all())
        for invitation in invitations:
            invitation.status = InvitationStatus.expired
            invitation.updated_at = now
            self.session.add(invitation)
        await self.session.flush()
        return len(invitations)
