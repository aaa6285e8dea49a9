from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from conpanion.domain.entities import (
    NotificationPreference,
    NotificationSettings,
    NotificationType,
)


class INotificationPreferenceRepository(ABC):
    """Per-type preference repository interface"""

    @abstractmethod
    async def get(
        self, user_id: UUID, type: NotificationType
    ) -> Optional[NotificationPreference]:
        """Get a user's preference for one type"""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UUID) -> List[NotificationPreference]:
        """Get all preferences of a user"""
        pass

    @abstractmethod
    async def create(self, preference: NotificationPreference) -> NotificationPreference:
        """Create a new preference"""
        pass

    @abstractmethod
    async def update(self, preference: NotificationPreference) -> NotificationPreference:
        """Update existing preference"""
        pass

    @abstractmethod
    async def create_defaults(self, user_id: UUID) -> None:
        """Insert default rows for every type, leaving existing rows untouched"""
        pass


class INotificationSettingsRepository(ABC):
    """Per-user settings repository interface"""

    @abstractmethod
    async def get(self, user_id: UUID) -> Optional[NotificationSettings]:
        """Get a user's settings"""
        pass

    @abstractmethod
    async def create(self, settings: NotificationSettings) -> NotificationSettings:
        """Create settings"""
        pass

    @abstractmethod
    async def update(self, settings: NotificationSettings) -> NotificationSettings:
        """Update settings"""
        pass
