"""
Approval Use Cases

Approval requests, their approvers, status transitions, comments and
approver responses.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.events import (
    ApprovalApproverAdded,
    ApprovalCommentAdded,
    ApprovalCreated,
    ApprovalResponseAdded,
    ApprovalStatusChanged,
    EventBus,
    default_event_bus,
)
from conpanion.app.services.entity_titles import TITLE_RESOLVERS
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    Approval,
    ApprovalApprover,
    ApprovalComment,
    ApprovalResponse,
    ApprovalStatus,
)
from conpanion.domain.entities.approval import TERMINAL_APPROVAL_STATUSES
from conpanion.domain.entity_ref import EntityRef

from .access import check_project_access, project_of
from .dtos import ApprovalActivityResponse, ApprovalResponseDTO


async def _participants(uow: UnitOfWork, approval: Approval) -> List[UUID]:
    return [approval.requester_id, *await uow.approvals.list_approver_ids(approval.id)]


class CreateApprovalUseCase:
    """
    Opens an approval request.

    Business Rules:
    - The entity reference is optional ("General Approval")
    - When the entity lives in a project, the requester needs access to it
    - At least one approver is required
    """

    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self,
        user_id: UUID,
        approver_ids: List[UUID],
        entity: Optional[EntityRef] = None,
        due_date: Optional[datetime] = None,
    ) -> Result[ApprovalResponseDTO]:
        approvers = list(dict.fromkeys(approver_ids or []))
        if not approvers:
            return Return.err(Error("INVALID_INPUT", "At least one approver is required"))

        async with self.uow:
            if entity is not None:
                if await TITLE_RESOLVERS[entity.kind](self.uow, entity.id) is None:
                    return Return.err(Error("NOT_FOUND", f"{entity.kind.value} not found"))
                project_id = await project_of(self.uow, entity)
                if project_id is not None:
                    error = await check_project_access(self.uow, project_id, user_id)
                    if error:
                        return Return.err(error)

            known_users = await self.uow.users.get_by_ids(approvers)
            missing = [str(a) for a in approvers if a not in known_users]
            if missing:
                return Return.err(
                    Error("NOT_FOUND", "Unknown approvers", {"user_ids": missing})
                )

            approval = await self.uow.approvals.create(
                Approval(
                    entity_type=entity.kind if entity else None,
                    entity_id=entity.id if entity else None,
                    requester_id=user_id,
                    due_date=due_date,
                    created_by=user_id,
                )
            )
            for approver_id in approvers:
                await self.uow.approvals.add_approver(
                    ApprovalApprover(approval_id=approval.id, approver_id=approver_id)
                )

            await self.events.publish(
                self.uow, ApprovalCreated(approval_id=approval.id, created_by=user_id)
            )
            await self.uow.commit()
            return Return.ok(ApprovalResponseDTO.from_entity(approval, approvers))


class AddApproverUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, user_id: UUID, approval_id: UUID, approver_id: UUID
    ) -> Result[ApprovalResponseDTO]:
        async with self.uow:
            approval = await self.uow.approvals.get_by_id(approval_id)
            if approval is None:
                return Return.err(Error("NOT_FOUND", "Approval not found"))
            if user_id not in await _participants(self.uow, approval):
                return Return.err(
                    Error("PERMISSION_DENIED", "Only participants can add approvers")
                )
            if approval.status != ApprovalStatus.pending:
                return Return.err(
                    Error("INVALID_INPUT", "Approval is no longer pending")
                )

            approvers = await self.uow.approvals.list_approver_ids(approval.id)
            if approver_id in approvers:
                return Return.err(Error("ALREADY_ASSIGNED", "User is already an approver"))
            if await self.uow.users.get_by_id(approver_id) is None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            await self.uow.approvals.add_approver(
                ApprovalApprover(approval_id=approval.id, approver_id=approver_id)
            )
            await self.events.publish(
                self.uow,
                ApprovalApproverAdded(
                    approval_id=approval.id, approver_id=approver_id, added_by=user_id
                ),
            )
            await self.uow.commit()
            return Return.ok(
                ApprovalResponseDTO.from_entity(approval, [*approvers, approver_id])
            )


class ChangeApprovalStatusUseCase:
    """
    Moves a pending approval to approved, declined or revision_requested.

    Business Rules:
    - Only approvers can change the status
    - Terminal states are final
    """

    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, user_id: UUID, approval_id: UUID, status: ApprovalStatus
    ) -> Result[ApprovalResponseDTO]:
        if status not in TERMINAL_APPROVAL_STATUSES:
            return Return.err(
                Error("INVALID_INPUT", "Status must be approved, declined or revision_requested")
            )

        async with self.uow:
            approval = await self.uow.approvals.get_by_id(approval_id)
            if approval is None:
                return Return.err(Error("NOT_FOUND", "Approval not found"))

            approvers = await self.uow.approvals.list_approver_ids(approval.id)
            if user_id not in approvers:
                return Return.err(
                    Error("PERMISSION_DENIED", "Only approvers can change the status")
                )
            if approval.status != ApprovalStatus.pending:
                return Return.err(
                    Error("INVALID_INPUT", f"Approval is already {approval.status.value}")
                )

            old_status = approval.status
            approval.status = status
            approval.action_by = user_id
            approval.updated_at = utcnow()
            approval = await self.uow.approvals.update(approval)

            await self.events.publish(
                self.uow,
                ApprovalStatusChanged(
                    approval_id=approval.id,
                    old_status=old_status,
                    new_status=status,
                    changed_by=user_id,
                ),
            )
            await self.uow.commit()
            return Return.ok(ApprovalResponseDTO.from_entity(approval, approvers))


class AddApprovalCommentUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, user_id: UUID, approval_id: UUID, comment: str
    ) -> Result[ApprovalActivityResponse]:
        if not (comment or "").strip():
            return Return.err(Error("INVALID_INPUT", "Comment cannot be empty"))

        async with self.uow:
            approval = await self.uow.approvals.get_by_id(approval_id)
            if approval is None:
                return Return.err(Error("NOT_FOUND", "Approval not found"))
            if user_id not in await _participants(self.uow, approval):
                return Return.err(
                    Error("PERMISSION_DENIED", "Only participants can comment")
                )

            record = await self.uow.approvals.add_comment(
                ApprovalComment(approval_id=approval.id, user_id=user_id, comment=comment)
            )
            await self.events.publish(
                self.uow,
                ApprovalCommentAdded(
                    comment_id=record.id,
                    approval_id=approval.id,
                    user_id=user_id,
                    comment=comment,
                ),
            )
            await self.uow.commit()
            return Return.ok(
                ApprovalActivityResponse(
                    id=str(record.id),
                    approval_id=str(approval.id),
                    user_id=str(user_id),
                    comment=record.comment,
                )
            )


class RespondToApprovalUseCase:
    """An approver's response; the approval status itself is left unchanged"""

    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self,
        user_id: UUID,
        approval_id: UUID,
        status: ApprovalStatus,
        comment: Optional[str] = None,
    ) -> Result[ApprovalActivityResponse]:
        if status not in TERMINAL_APPROVAL_STATUSES:
            return Return.err(
                Error("INVALID_INPUT", "Response must be approved, declined or revision_requested")
            )

        async with self.uow:
            approval = await self.uow.approvals.get_by_id(approval_id)
            if approval is None:
                return Return.err(Error("NOT_FOUND", "Approval not found"))
            if user_id not in await self.uow.approvals.list_approver_ids(approval.id):
                return Return.err(
                    Error("PERMISSION_DENIED", "Only approvers can respond")
                )

            response = await self.uow.approvals.add_response(
                ApprovalResponse(
                    approval_id=approval.id,
                    approver_id=user_id,
                    status=status,
                    comment=comment,
                )
            )
            await self.events.publish(
                self.uow,
                ApprovalResponseAdded(
                    response_id=response.id,
                    approval_id=approval.id,
                    approver_id=user_id,
                    status=status,
                ),
            )
            await self.uow.commit()
            return Return.ok(
                ApprovalActivityResponse(
                    id=str(response.id),
                    approval_id=str(approval.id),
                    user_id=str(user_id),
                    status=status.value,
                    comment=comment,
                )
            )
