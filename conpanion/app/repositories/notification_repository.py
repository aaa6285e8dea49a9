from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from conpanion.domain.entities import (
    Notification,
    NotificationDelivery,
    NotificationTemplate,
    NotificationType,
)
from conpanion.domain.templates import TemplateSeed


class INotificationRepository(ABC):
    """Notification repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID"""
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: UUID, unread_only: bool, limit: int, offset: int
    ) -> List[Notification]:
        """Get a user's notifications, newest first"""
        pass

    @abstractmethod
    async def count_unread(self, user_id: UUID) -> int:
        """Count a user's unread notifications"""
        pass

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Create a new notification"""
        pass

    @abstractmethod
    async def update(self, notification: Notification) -> Notification:
        """Update existing notification"""
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: UUID, now: datetime) -> int:
        """Mark every unread notification of a user as read"""
        pass

    @abstractmethod
    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete notifications (and their deliveries) older than cutoff"""
        pass


class INotificationDeliveryRepository(ABC):
    """Delivery tracking repository interface"""

    @abstractmethod
    async def create(self, delivery: NotificationDelivery) -> NotificationDelivery:
        """Record a delivery outcome"""
        pass

    @abstractmethod
    async def list_for_notification(
        self, notification_id: UUID
    ) -> List[NotificationDelivery]:
        """Get all deliveries recorded for a notification"""
        pass

    @abstractmethod
    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete delivery rows older than cutoff"""
        pass


class INotificationTemplateRepository(ABC):
    """Notification template repository interface"""

    @abstractmethod
    async def get_active(
        self, type: NotificationType, name: str
    ) -> Optional[NotificationTemplate]:
        """Get an active template by (type, name)"""
        pass

    @abstractmethod
    async def list_all(self) -> List[NotificationTemplate]:
        """Get all templates"""
        pass

    @abstractmethod
    async def create_missing(self, seeds: Sequence[TemplateSeed]) -> int:
        """Insert seeds whose (type, name) does not exist yet"""
        pass
