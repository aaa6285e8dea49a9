from datetime import datetime, timedelta
from typing import Optional

from conpanion.app.events.events import (
    ApprovalApproverAdded,
    ApprovalCommentAdded,
    ApprovalCreated,
    ApprovalResponseAdded,
    ApprovalStatusChanged,
)
from conpanion.app.services.entity_titles import resolve_entity_title
from conpanion.app.services.notification_engine import (
    REQUESTER_CONFIRMATION_TEMPLATE,
    NotificationEngine,
)
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    Approval,
    ApprovalStatus,
    EntityKind,
    NotificationPriority,
    NotificationType,
)
from conpanion.domain.entity_ref import EntityRef

from .common import actor_name, recipients_excluding

COMMENT_PREVIEW_LENGTH = 100

STATUS_LABELS = {
    ApprovalStatus.pending: "pending",
    ApprovalStatus.approved: "approved",
    ApprovalStatus.declined: "declined",
    ApprovalStatus.revision_requested: "sent back for revision",
}


def approval_priority(
    due_date: Optional[datetime], now: Optional[datetime] = None
) -> NotificationPriority:
    """Critical when due within a day, high within three days"""
    if due_date is None:
        return NotificationPriority.medium
    remaining = due_date - (now or utcnow())
    if remaining <= timedelta(days=1):
        return NotificationPriority.critical
    if remaining <= timedelta(days=3):
        return NotificationPriority.high
    return NotificationPriority.medium


async def _context(uow: UnitOfWork, approval: Approval) -> tuple:
    target = EntityRef.from_columns(approval.entity_type, approval.entity_id)
    title = await resolve_entity_title(uow, target)
    data = {
        "approval_id": str(approval.id),
        "entity_title": title,
        "entity_type": approval.entity_type.value if approval.entity_type else None,
        "entity_id": str(approval.entity_id) if approval.entity_id else None,
        "status": approval.status.value,
        "due_date": approval.due_date.isoformat() if approval.due_date else None,
    }
    return title, data, EntityRef(EntityKind.approval, approval.id)


async def notify_approval_created(uow: UnitOfWork, event: ApprovalCreated) -> None:
    approval = await uow.approvals.get_by_id(event.approval_id)
    if approval is None:
        return

    title, data, ref = await _context(uow, approval)
    requester = await actor_name(uow, approval.requester_id)
    engine = NotificationEngine(uow)

    await engine.create_notification(
        user_id=approval.requester_id,
        type=NotificationType.approval_requested,
        template_name=REQUESTER_CONFIRMATION_TEMPLATE,
        template_args=[title],
        data=data,
        entity_ref=ref,
        priority=NotificationPriority.medium,
        created_by=approval.requester_id,
    )

    approvers = recipients_excluding(
        await uow.approvals.list_approver_ids(approval.id), approval.requester_id
    )
    priority = approval_priority(approval.due_date)
    for approver_id in approvers:
        await engine.create_notification(
            user_id=approver_id,
            type=NotificationType.approval_requested,
            template_args=[requester, title],
            data=data,
            entity_ref=ref,
            priority=priority,
            created_by=approval.requester_id,
        )


async def notify_approver_added(uow: UnitOfWork, event: ApprovalApproverAdded) -> None:
    approval = await uow.approvals.get_by_id(event.approval_id)
    if approval is None:
        return
    if event.approver_id in (approval.requester_id, event.added_by):
        return

    title, data, ref = await _context(uow, approval)
    requester = await actor_name(uow, approval.requester_id)
    await NotificationEngine(uow).create_notification(
        user_id=event.approver_id,
        type=NotificationType.approval_requested,
        template_args=[requester, title],
        data=data,
        entity_ref=ref,
        priority=approval_priority(approval.due_date),
        created_by=event.added_by,
    )


async def notify_approval_status_changed(
    uow: UnitOfWork, event: ApprovalStatusChanged
) -> None:
    approval = await uow.approvals.get_by_id(event.approval_id)
    if approval is None:
        return

    title, data, ref = await _context(uow, approval)
    actor = await actor_name(uow, event.changed_by)
    status_label = STATUS_LABELS[event.new_status]
    data.update(
        {
            "old_status": event.old_status.value,
            "new_status": event.new_status.value,
            "changed_by": actor,
        }
    )
    engine = NotificationEngine(uow)

    if approval.requester_id != event.changed_by:
        await engine.create_notification(
            user_id=approval.requester_id,
            type=NotificationType.approval_status_changed,
            template_args=[title, status_label, actor],
            data=data,
            entity_ref=ref,
            priority=NotificationPriority.high,
            created_by=event.changed_by,
        )

    others = recipients_excluding(
        await uow.approvals.list_approver_ids(approval.id),
        event.changed_by,
        approval.requester_id,
    )
    for approver_id in others:
        await engine.create_notification(
            user_id=approver_id,
            type=NotificationType.approval_status_changed,
            template_name="approver_update",
            template_args=[title, status_label, actor],
            data=data,
            entity_ref=ref,
            priority=NotificationPriority.medium,
            created_by=event.changed_by,
        )


async def notify_approval_comment_added(
    uow: UnitOfWork, event: ApprovalCommentAdded
) -> None:
    approval = await uow.approvals.get_by_id(event.approval_id)
    if approval is None:
        return

    title, data, ref = await _context(uow, approval)
    commenter = await actor_name(uow, event.user_id)
    preview = event.comment[:COMMENT_PREVIEW_LENGTH]
    data.update(
        {
            "comment_id": str(event.comment_id),
            "comment_preview": preview,
            "commenter": commenter,
        }
    )

    recipients = recipients_excluding(
        [approval.requester_id, *await uow.approvals.list_approver_ids(approval.id)],
        event.user_id,
    )
    engine = NotificationEngine(uow)
    for user_id in recipients:
        await engine.create_notification(
            user_id=user_id,
            type=NotificationType.approval_requested,
            template_name="comment_notification",
            template_args=[commenter, title, preview],
            data=data,
            entity_ref=ref,
            priority=NotificationPriority.medium,
            created_by=event.user_id,
        )


async def notify_approval_response_added(
    uow: UnitOfWork, event: ApprovalResponseAdded
) -> None:
    approval = await uow.approvals.get_by_id(event.approval_id)
    if approval is None:
        return

    title, data, ref = await _context(uow, approval)
    responder = await actor_name(uow, event.approver_id)
    data.update(
        {
            "response_id": str(event.response_id),
            "response_status": event.status.value,
            "responder": responder,
        }
    )
    engine = NotificationEngine(uow)

    if approval.requester_id != event.approver_id:
        await engine.create_notification(
            user_id=approval.requester_id,
            type=NotificationType.approval_status_changed,
            template_name="response_received",
            template_args=[responder, title],
            data=data,
            entity_ref=ref,
            priority=NotificationPriority.high,
            created_by=event.approver_id,
        )

    others = recipients_excluding(
        await uow.approvals.list_approver_ids(approval.id),
        event.approver_id,
        approval.requester_id,
    )
    for approver_id in others:
        await engine.create_notification(
            user_id=approver_id,
            type=NotificationType.approval_requested,
            template_name="response_notification",
            template_args=[responder, title, STATUS_LABELS[event.status]],
            data=data,
            entity_ref=ref,
            priority=NotificationPriority.medium,
            created_by=event.approver_id,
        )
