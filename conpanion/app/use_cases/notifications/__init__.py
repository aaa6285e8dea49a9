"""
Notification Use Cases

Reading, marking and housekeeping of in-app notifications.
"""

from .cleanup_old_notifications_use_case import CleanupOldNotificationsUseCase
from .create_system_notification_use_case import CreateSystemNotificationUseCase
from .dtos import (
    CleanupNotificationsResponse,
    MarkAllReadResponse,
    NotificationItem,
    NotificationPage,
    SeedTemplatesResponse,
    SystemNotificationResponse,
    UnreadCountResponse,
)
from .list_notifications_use_case import ListNotificationsUseCase, UnreadCountUseCase
from .mark_read_use_case import (
    MarkAllNotificationsReadUseCase,
    MarkNotificationReadUseCase,
)
from .seed_notification_templates_use_case import SeedNotificationTemplatesUseCase

__all__ = [
    "CreateSystemNotificationUseCase",
    "ListNotificationsUseCase",
    "UnreadCountUseCase",
    "MarkNotificationReadUseCase",
    "MarkAllNotificationsReadUseCase",
    "CleanupOldNotificationsUseCase",
    "SeedNotificationTemplatesUseCase",
    "NotificationItem",
    "NotificationPage",
    "UnreadCountResponse",
    "MarkAllReadResponse",
    "SystemNotificationResponse",
    "CleanupNotificationsResponse",
    "SeedTemplatesResponse",
]
