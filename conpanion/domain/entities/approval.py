"""
Approval Entities

Approval requests against an entity, their approvers, comments and
responses.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import ApprovalStatus, EntityKind

TERMINAL_APPROVAL_STATUSES = (
    ApprovalStatus.approved,
    ApprovalStatus.declined,
    ApprovalStatus.revision_requested,
)


class Approval(SQLModel, table=True):
    """
    Approval entity.

    Business Rules:
    - pending -> approved | declined | revision_requested
    - entity reference is optional ("General Approval")
    - The requester is never notified as an approver
    """

    __tablename__ = "approvals"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    entity_type: Optional[EntityKind] = Field(default=None)
    entity_id: Optional[UUID] = Field(default=None)

    requester_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    status: ApprovalStatus = Field(default=ApprovalStatus.pending)
    due_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    action_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class ApprovalApprover(SQLModel, table=True):
    __tablename__ = "approval_approvers"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    approval_id: UUID = Field(foreign_key="approvals.id", nullable=False)
    approver_id: UUID = Field(foreign_key="users.id", nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uq_approval_approver", "approval_id", "approver_id", unique=True),
    )


class ApprovalComment(SQLModel, table=True):
    __tablename__ = "approval_comments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    approval_id: UUID = Field(foreign_key="approvals.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False)
    comment: str = Field(nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class ApprovalResponse(SQLModel, table=True):
    """An approver's response; does not by itself move the approval status"""

    __tablename__ = "approval_responses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    approval_id: UUID = Field(foreign_key="approvals.id", nullable=False, index=True)
    approver_id: UUID = Field(foreign_key="users.id", nullable=False)
    status: ApprovalStatus = Field(nullable=False)
    comment: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
