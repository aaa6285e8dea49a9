"""
Process Delivery Queue Use Cases

Drain due email/push queue rows through the external delivery function.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from libs.result import Result, Return
from conpanion.app.repositories.delivery_queue_repository import IDeliveryQueueRepository
from conpanion.app.services.delivery_client import DeliveryOutcome, IDeliveryClient
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    DeliveryChannel,
    DeliveryStatus,
    NotificationDelivery,
)
from conpanion.domain.entities.delivery_queue import MAX_QUEUE_RETRIES

from .dtos import QueueProcessResponse

logger = logging.getLogger(__name__)


class ProcessQueueUseCase(ABC):
    """
    Drains one delivery queue.

    Business Rules:
    - Only due pending rows are picked, critical priority first, then oldest schedule
    - Picked rows are marked processing and committed before the external call
    - One external call per pass; its outcome applies to the whole batch
    - Failures bump retry_count (capped at 5) and record the error
    - Every outcome is also recorded in the delivery tracking table
    """

    channel: DeliveryChannel

    def __init__(self, uow: UnitOfWork, client: IDeliveryClient):
        self.uow = uow
        self.client = client

    @abstractmethod
    def queue(self) -> IDeliveryQueueRepository:
        pass

    async def execute(self, limit: int) -> Result[QueueProcessResponse]:
        async with self.uow:
            entries = await self.queue().list_due(utcnow(), limit)
            if not entries:
                return Return.ok(
                    QueueProcessResponse(
                        channel=self.channel.value, processed=0, sent=0, failed=0
                    )
                )

            now = utcnow()
            for entry in entries:
                entry.status = DeliveryStatus.processing
                entry.updated_at = now
            await self.queue().update_many(entries)
            await self.uow.commit()

        try:
            outcome = await self.client.dispatch(self.channel)
        except Exception as exc:
            logger.exception("Delivery call for %s queue raised", self.channel.value)
            outcome = DeliveryOutcome(ok=False, error=str(exc) or type(exc).__name__)

        async with self.uow:
            await self._record(entries, outcome)
            await self.uow.commit()

        sent = len(entries) if outcome.ok else 0
        logger.info(
            "Processed %d %s queue entries: %d sent, %d failed",
            len(entries),
            self.channel.value,
            sent,
            len(entries) - sent,
        )
        return Return.ok(
            QueueProcessResponse(
                channel=self.channel.value,
                processed=len(entries),
                sent=sent,
                failed=len(entries) - sent,
                error=outcome.error,
            )
        )

    async def _record(self, entries: List, outcome: DeliveryOutcome) -> None:
        now = utcnow()
        for entry in entries:
            entry.updated_at = now
            if outcome.ok:
                entry.status = DeliveryStatus.sent
                entry.sent_at = now
                entry.error_message = None
            else:
                entry.status = DeliveryStatus.failed
                entry.retry_count = min(entry.retry_count + 1, MAX_QUEUE_RETRIES)
                entry.error_message = outcome.error

            await self.uow.deliveries.create(
                NotificationDelivery(
                    notification_id=entry.notification_id,
                    channel=self.channel,
                    status=entry.status,
                    delivered_at=now if outcome.ok else None,
                    retry_count=entry.retry_count,
                    error_message=entry.error_message,
                    details={"queue_entry_id": str(entry.id), "status_code": outcome.status_code},
                )
            )
        await self.queue().update_many(entries)


class ProcessEmailQueueUseCase(ProcessQueueUseCase):
    channel = DeliveryChannel.email

    def queue(self) -> IDeliveryQueueRepository:
        return self.uow.email_queue


class ProcessPushQueueUseCase(ProcessQueueUseCase):
    channel = DeliveryChannel.push

    def queue(self) -> IDeliveryQueueRepository:
        return self.uow.push_queue
