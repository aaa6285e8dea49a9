from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from conpanion.domain.entities import Invitation, InvitationScope


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        pass

    @abstractmethod
    async def get_pending_for_email(
        self, scope: InvitationScope, scope_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get the pending invitation for (scope, email), expired or not"""
        pass

    @abstractmethod
    async def list_pending_for_scope(
        self, scope: InvitationScope, scope_id: UUID, now: datetime
    ) -> List[Invitation]:
        """Get pending, unexpired invitations of a scope"""
        pass

    @abstractmethod
    async def list_pending_for_user(
        self, user_id: UUID, email: str, now: datetime
    ) -> List[Invitation]:
        """Get pending, unexpired invitations addressed to a user"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        pass

    @abstractmethod
    async def delete(self, invitation: Invitation) -> None:
        """Delete an invitation"""
        pass

    @abstractmethod
    async def link_user(self, user_id: UUID, email: str, now: datetime) -> int:
        """Attach user_id to unlinked pending invitations for email"""
        pass

    @abstractmethod
    async def expire_overdue(self, now: datetime) -> int:
        """Flip pending invitations past expiry to expired"""
        pass
