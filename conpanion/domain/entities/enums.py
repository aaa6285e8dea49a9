"""
Conpanion Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class OrganizationRole(str, Enum):
    """User role within an organization"""

    owner = "owner"
    admin = "admin"
    member = "member"
    guest = "guest"


class ProjectRole(str, Enum):
    """User role within a project (no guest role)"""

    owner = "owner"
    admin = "admin"
    member = "member"


class MembershipStatus(str, Enum):
    """Membership status"""

    pending = "pending"
    active = "active"
    deactivated = "deactivated"


class InvitationScope(str, Enum):
    """What an invitation grants membership of"""

    organization = "organization"
    project = "project"


class InvitationStatus(str, Enum):
    """Invitation status"""

    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    expired = "expired"


class NotificationType(str, Enum):
    """Closed set of domain events a notification can represent"""

    system = "system"
    organization_added = "organization_added"
    project_added = "project_added"
    task_assigned = "task_assigned"
    task_updated = "task_updated"
    task_comment = "task_comment"
    comment_mention = "comment_mention"
    task_unassigned = "task_unassigned"
    form_assigned = "form_assigned"
    form_unassigned = "form_unassigned"
    approval_requested = "approval_requested"
    approval_status_changed = "approval_status_changed"
    entity_assigned = "entity_assigned"


class NotificationPriority(str, Enum):
    """Notification priority"""

    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class DeliveryChannel(str, Enum):
    """Delivery channel"""

    realtime = "realtime"
    email = "email"
    push = "push"


class DeliveryStatus(str, Enum):
    """Status of a delivery attempt or queue entry"""

    pending = "pending"
    processing = "processing"
    sent = "sent"
    failed = "failed"


class DevicePlatform(str, Enum):
    """Platform of a push subscription"""

    web = "web"
    ios = "ios"
    android = "android"


class ApprovalStatus(str, Enum):
    """Approval state machine: pending -> approved | declined | revision_requested"""

    pending = "pending"
    approved = "approved"
    declined = "declined"
    revision_requested = "revision_requested"


class EntityKind(str, Enum):
    """Kinds of entity a notification or approval can point at"""

    task = "task"
    form = "form"
    entries = "entries"
    site_diary = "site_diary"
    task_comment = "task_comment"
    project = "project"
    organization = "organization"
    approval = "approval"
    approval_comment = "approval_comment"
    approval_response = "approval_response"
