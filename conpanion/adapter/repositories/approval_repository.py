from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.app.repositories.approval_repository import IApprovalRepository
from conpanion.domain.entities import (
    Approval,
    ApprovalApprover,
    ApprovalComment,
    ApprovalResponse,
)


class ApprovalRepository(IApprovalRepository):
    """Approval repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, row):
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def get_by_id(self, approval_id: UUID) -> Optional[Approval]:
        stmt = select(Approval).where(Approval.id == approval_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, approval: Approval) -> Approval:
        return await self._save(approval)

    async def update(self, approval: Approval) -> Approval:
        return await self._save(approval)

    async def list_approver_ids(self, approval_id: UUID) -> List[UUID]:
        stmt = (
            select(ApprovalApprover.approver_id)
            .where(ApprovalApprover.approval_id == approval_id)
            .order_by(ApprovalApprover.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_approver(self, approver: ApprovalApprover) -> ApprovalApprover:
        return await self._save(approver)

    async def get_comment(self, comment_id: UUID) -> Optional[ApprovalComment]:
        stmt = select(ApprovalComment).where(ApprovalComment.id == comment_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_comment(self, comment: ApprovalComment) -> ApprovalComment:
        return await self._save(comment)

    async def get_response(self, response_id: UUID) -> Optional[ApprovalResponse]:
        stmt = select(ApprovalResponse).where(ApprovalResponse.id == response_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_response(self, response: ApprovalResponse) -> ApprovalResponse:
        return await self._save(response)
