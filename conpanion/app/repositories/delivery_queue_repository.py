from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from conpanion.domain.entities import EmailQueueEntry, PushQueueEntry

Q = TypeVar("Q")


class IDeliveryQueueRepository(ABC, Generic[Q]):
    """Delivery queue repository interface, shared by email and push"""

    @abstractmethod
    async def get_by_id(self, entry_id: UUID) -> Optional[Q]:
        """Get queue entry by ID"""
        pass

    @abstractmethod
    async def create(self, entry: Q) -> Q:
        """Enqueue an entry"""
        pass

    @abstractmethod
    async def update(self, entry: Q) -> Q:
        """Update existing entry"""
        pass

    @abstractmethod
    async def update_many(self, entries: List[Q]) -> None:
        """Persist changes to several entries"""
        pass

    @abstractmethod
    async def list_due(self, now: datetime, limit: int) -> List[Q]:
        """Get due pending entries, highest priority first, then oldest schedule"""
        pass

    @abstractmethod
    async def list_for_notification(self, notification_id: UUID) -> List[Q]:
        """Get entries produced for a notification"""
        pass

    @abstractmethod
    async def rearm_failed(
        self,
        now: datetime,
        max_retries: int,
        lookback: timedelta,
        backoff: timedelta,
    ) -> int:
        """Put recent failed entries under max_retries back to pending"""
        pass

    @abstractmethod
    async def delete_finished_before(self, cutoff: datetime) -> int:
        """Delete sent/failed entries older than cutoff"""
        pass


class IEmailQueueRepository(IDeliveryQueueRepository[EmailQueueEntry]):
    """Email queue repository interface"""


class IPushQueueRepository(IDeliveryQueueRepository[PushQueueEntry]):
    """Push queue repository interface"""
