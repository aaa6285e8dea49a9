"""
Retry Failed Notifications Use Case

Re-arms recently failed queue rows with a linear backoff.
"""

import logging
from datetime import timedelta

from libs.result import Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow

from .dtos import RetryFailedResponse

logger = logging.getLogger(__name__)

EMAIL_MAX_RETRIES = 3
EMAIL_RETRY_LOOKBACK = timedelta(hours=24)
EMAIL_RETRY_BACKOFF = timedelta(minutes=15)

PUSH_MAX_RETRIES = 5
PUSH_RETRY_LOOKBACK = timedelta(hours=6)
PUSH_RETRY_BACKOFF = timedelta(minutes=5)


class RetryFailedNotificationsUseCase:
    """
    Business Rules:
    - Email: retry_count < 3, created in the last 24h, next try at now + retry_count * 15 min
    - Push: retry_count < 5, created in the last 6h, next try at now + retry_count * 5 min
    - Re-armed rows go back to pending with the error cleared
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[RetryFailedResponse]:
        now = utcnow()
        async with self.uow:
            email = await self.uow.email_queue.rearm_failed(
                now, EMAIL_MAX_RETRIES, EMAIL_RETRY_LOOKBACK, EMAIL_RETRY_BACKOFF
            )
            push = await self.uow.push_queue.rearm_failed(
                now, PUSH_MAX_RETRIES, PUSH_RETRY_LOOKBACK, PUSH_RETRY_BACKOFF
            )
            await self.uow.commit()

        if email or push:
            logger.info("Re-armed %d email and %d push deliveries", email, push)
        return Return.ok(RetryFailedResponse(email_requeued=email, push_requeued=push))
