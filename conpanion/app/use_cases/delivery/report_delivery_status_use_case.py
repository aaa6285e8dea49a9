"""
Report Delivery Status Use Case

Status callback from the delivery functions for a single queue row.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    DeliveryChannel,
    DeliveryStatus,
    NotificationDelivery,
)
from conpanion.domain.entities.delivery_queue import MAX_QUEUE_RETRIES

from .dtos import DeliveryStatusResponse

REPORTABLE_STATUSES = (DeliveryStatus.sent, DeliveryStatus.failed)


class ReportDeliveryStatusUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        channel: DeliveryChannel,
        entry_id: UUID,
        status: DeliveryStatus,
        error: Optional[str] = None,
    ) -> Result[DeliveryStatusResponse]:
        if status not in REPORTABLE_STATUSES:
            return Return.err(
                Error("INVALID_INPUT", "Reported status must be sent or failed")
            )

        async with self.uow:
            if channel == DeliveryChannel.email:
                queue = self.uow.email_queue
            elif channel == DeliveryChannel.push:
                queue = self.uow.push_queue
            else:
                return Return.err(
                    Error("INVALID_INPUT", f"No delivery queue for {channel.value}")
                )

            entry = await queue.get_by_id(entry_id)
            if entry is None:
                return Return.err(Error("NOT_FOUND", "Queue entry not found"))

            now = utcnow()
            entry.status = status
            entry.updated_at = now
            if status == DeliveryStatus.sent:
                entry.sent_at = now
                entry.error_message = None
            else:
                entry.retry_count = min(entry.retry_count + 1, MAX_QUEUE_RETRIES)
                entry.error_message = error
            entry = await queue.update(entry)

            await self.uow.deliveries.create(
                NotificationDelivery(
                    notification_id=entry.notification_id,
                    channel=channel,
                    status=status,
                    delivered_at=now if status == DeliveryStatus.sent else None,
                    retry_count=entry.retry_count,
                    error_message=entry.error_message,
                    details={"queue_entry_id": str(entry.id), "reported": True},
                )
            )
            await self.uow.commit()

            return Return.ok(
                DeliveryStatusResponse(
                    channel=channel.value,
                    entry_id=str(entry.id),
                    status=entry.status.value,
                    retry_count=entry.retry_count,
                )
            )
