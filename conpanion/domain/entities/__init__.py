"""
Conpanion Domain Entities

All domain entities organized by model.
Each aggregate in its own file.
"""

# Export all enums
from .enums import (
    ApprovalStatus,
    DeliveryChannel,
    DeliveryStatus,
    DevicePlatform,
    EntityKind,
    InvitationScope,
    InvitationStatus,
    MembershipStatus,
    NotificationPriority,
    NotificationType,
    OrganizationRole,
    ProjectRole,
)

# Export all entities
from .user import User
from .organization import Organization, Project
from .membership import OrganizationMembership, ProjectMembership
from .invitation import Invitation
from .notification import Notification, NotificationDelivery, NotificationTemplate
from .preference import NotificationPreference, NotificationSettings
from .push_subscription import PushSubscription
from .delivery_queue import EmailQueueEntry, PushQueueEntry
from .work import (
    EntityAssignee,
    Form,
    FormEntry,
    SiteDiary,
    Task,
    TaskComment,
    TaskMetadata,
)
from .approval import Approval, ApprovalApprover, ApprovalComment, ApprovalResponse

__all__ = [
    # Enums
    "ApprovalStatus",
    "DeliveryChannel",
    "DeliveryStatus",
    "DevicePlatform",
    "EntityKind",
    "InvitationScope",
    "InvitationStatus",
    "MembershipStatus",
    "NotificationPriority",
    "NotificationType",
    "OrganizationRole",
    "ProjectRole",
    # Identity & membership
    "User",
    "Organization",
    "Project",
    "OrganizationMembership",
    "ProjectMembership",
    "Invitation",
    # Notifications
    "Notification",
    "NotificationDelivery",
    "NotificationTemplate",
    "NotificationPreference",
    "NotificationSettings",
    "PushSubscription",
    "EmailQueueEntry",
    "PushQueueEntry",
    # Work domain
    "Task",
    "TaskMetadata",
    "TaskComment",
    "Form",
    "FormEntry",
    "SiteDiary",
    "EntityAssignee",
    "Approval",
    "ApprovalApprover",
    "ApprovalComment",
    "ApprovalResponse",
]
