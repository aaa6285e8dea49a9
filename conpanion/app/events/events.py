"""
Domain events

Emitted by use cases right after the mutation they describe, inside the
same transaction.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from uuid import UUID

from conpanion.domain.entities import ApprovalStatus, InvitationScope
from conpanion.domain.entity_ref import EntityRef


@dataclass(frozen=True)
class DomainEvent:
    pass


@dataclass(frozen=True)
class EntityAssigned(DomainEvent):
    entity: EntityRef
    user_id: UUID
    assigned_by: Optional[UUID]


@dataclass(frozen=True)
class EntityUnassigned(DomainEvent):
    entity: EntityRef
    user_id: UUID
    unassigned_by: Optional[UUID]


@dataclass(frozen=True)
class TaskUpdated(DomainEvent):
    task_id: UUID
    updated_by: Optional[UUID]
    old_values: Dict[str, Any] = field(default_factory=dict)
    new_values: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TaskMetadataChanged(DomainEvent):
    task_id: UUID
    changed_by: Optional[UUID]
    key: str
    action: str  # added | updated | removed
    old_value: Optional[str] = None
    new_value: Optional[str] = None


@dataclass(frozen=True)
class TaskCommentAdded(DomainEvent):
    comment_id: UUID
    task_id: UUID
    user_id: UUID
    content: str


@dataclass(frozen=True)
class MembershipCreated(DomainEvent):
    scope: InvitationScope
    scope_id: UUID
    user_id: UUID
    role: str
    added_by: Optional[UUID]


@dataclass(frozen=True)
class ApprovalCreated(DomainEvent):
    approval_id: UUID
    created_by: Optional[UUID]


@dataclass(frozen=True)
class ApprovalApproverAdded(DomainEvent):
    approval_id: UUID
    approver_id: UUID
    added_by: Optional[UUID]


@dataclass(frozen=True)
class ApprovalStatusChanged(DomainEvent):
    approval_id: UUID
    old_status: ApprovalStatus
    new_status: ApprovalStatus
    changed_by: Optional[UUID]


@dataclass(frozen=True)
class ApprovalCommentAdded(DomainEvent):
    comment_id: UUID
    approval_id: UUID
    user_id: UUID
    comment: str


@dataclass(frozen=True)
class ApprovalResponseAdded(DomainEvent):
    response_id: UUID
    approval_id: UUID
    approver_id: UUID
    status: ApprovalStatus
