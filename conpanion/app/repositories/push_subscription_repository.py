from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from conpanion.domain.entities import PushSubscription


class IPushSubscriptionRepository(ABC):
    """Push subscription repository interface"""

    @abstractmethod
    async def get(self, user_id: UUID, endpoint: str) -> Optional[PushSubscription]:
        """Get subscription by (user, endpoint)"""
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: UUID, push_enabled_only: bool = False
    ) -> List[PushSubscription]:
        """Get a user's active subscriptions"""
        pass

    @abstractmethod
    async def create(self, subscription: PushSubscription) -> PushSubscription:
        """Create a new subscription"""
        pass

    @abstractmethod
    async def update(self, subscription: PushSubscription) -> PushSubscription:
        """Update existing subscription"""
        pass

    @abstractmethod
    async def delete_inactive_before(self, cutoff: datetime) -> int:
        """Delete inactive subscriptions not touched since cutoff"""
        pass
