from conpanion.app.events.bus import EventBus
from conpanion.app.events.events import (
    ApprovalApproverAdded,
    ApprovalCommentAdded,
    ApprovalCreated,
    ApprovalResponseAdded,
    ApprovalStatusChanged,
    EntityAssigned,
    EntityUnassigned,
    MembershipCreated,
    TaskCommentAdded,
    TaskMetadataChanged,
    TaskUpdated,
)

from .approvals import (
    notify_approval_comment_added,
    notify_approval_created,
    notify_approval_response_added,
    notify_approval_status_changed,
    notify_approver_added,
)
from .assignments import notify_entity_assigned, notify_entity_unassigned
from .memberships import notify_membership_created
from .tasks import (
    notify_task_comment_added,
    notify_task_metadata_changed,
    notify_task_updated,
)

NOTIFICATION_HANDLERS = (
    (EntityAssigned, notify_entity_assigned),
    (EntityUnassigned, notify_entity_unassigned),
    (TaskUpdated, notify_task_updated),
    (TaskMetadataChanged, notify_task_metadata_changed),
    (TaskCommentAdded, notify_task_comment_added),
    (MembershipCreated, notify_membership_created),
    (ApprovalCreated, notify_approval_created),
    (ApprovalApproverAdded, notify_approver_added),
    (ApprovalStatusChanged, notify_approval_status_changed),
    (ApprovalCommentAdded, notify_approval_comment_added),
    (ApprovalResponseAdded, notify_approval_response_added),
)


def register_notification_handlers(bus: EventBus) -> EventBus:
    for event_type, handler in NOTIFICATION_HANDLERS:
        bus.subscribe(event_type, handler)
    return bus


__all__ = ["NOTIFICATION_HANDLERS", "register_notification_handlers"]
