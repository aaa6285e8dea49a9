from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from conpanion.domain.entities import (
    Approval,
    ApprovalApprover,
    ApprovalComment,
    ApprovalResponse,
)


class IApprovalRepository(ABC):
    """Approval repository interface, covering approvers, comments and responses"""

    @abstractmethod
    async def get_by_id(self, approval_id: UUID) -> Optional[Approval]:
        """Get approval by ID"""
        pass

    @abstractmethod
    async def create(self, approval: Approval) -> Approval:
        """Create a new approval"""
        pass

    @abstractmethod
    async def update(self, approval: Approval) -> Approval:
        """Update existing approval"""
        pass

    @abstractmethod
    async def list_approver_ids(self, approval_id: UUID) -> List[UUID]:
        """Get the approvers of an approval"""
        pass

    @abstractmethod
    async def add_approver(self, approver: ApprovalApprover) -> ApprovalApprover:
        """Add an approver"""
        pass

    @abstractmethod
    async def get_comment(self, comment_id: UUID) -> Optional[ApprovalComment]:
        """Get approval comment by ID"""
        pass

    @abstractmethod
    async def add_comment(self, comment: ApprovalComment) -> ApprovalComment:
        """Add a comment"""
        pass

    @abstractmethod
    async def get_response(self, response_id: UUID) -> Optional[ApprovalResponse]:
        """Get approval response by ID"""
        pass

    @abstractmethod
    async def add_response(self, response: ApprovalResponse) -> ApprovalResponse:
        """Record an approver response"""
        pass
