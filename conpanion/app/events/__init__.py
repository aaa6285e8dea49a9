from .bus import EventBus
from .events import (
    ApprovalApproverAdded,
    ApprovalCommentAdded,
    ApprovalCreated,
    ApprovalResponseAdded,
    ApprovalStatusChanged,
    DomainEvent,
    EntityAssigned,
    EntityUnassigned,
    MembershipCreated,
    TaskCommentAdded,
    TaskMetadataChanged,
    TaskUpdated,
)

_default_bus = None


def default_event_bus() -> EventBus:
    """Process-wide bus with the notification handlers registered"""
    global _default_bus
    if _default_bus is None:
        from .handlers import register_notification_handlers

        _default_bus = register_notification_handlers(EventBus())
    return _default_bus


__all__ = [
    "EventBus",
    "default_event_bus",
    "DomainEvent",
    "EntityAssigned",
    "EntityUnassigned",
    "TaskUpdated",
    "TaskMetadataChanged",
    "TaskCommentAdded",
    "MembershipCreated",
    "ApprovalCreated",
    "ApprovalApproverAdded",
    "ApprovalStatusChanged",
    "ApprovalCommentAdded",
    "ApprovalResponseAdded",
]
