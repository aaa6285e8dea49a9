"""
Background jobs

Each job is a use case run on its own unit of work. The scheduler and the
admin job endpoint both go through run_job.
"""

import logging
from typing import Awaitable, Callable, Dict

from config import ApplicationConfig
from libs.result import Error, Result, Return
from conpanion.app.services.delivery_client import IDeliveryClient
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.delivery import (
    ProcessEmailQueueUseCase,
    ProcessPushQueueUseCase,
    RetryFailedNotificationsUseCase,
)
from conpanion.app.use_cases.invitations import CleanupExpiredInvitationsUseCase
from conpanion.app.use_cases.notifications import CleanupOldNotificationsUseCase
from conpanion.app.use_cases.preferences import CleanupInactiveSubscriptionsUseCase

logger = logging.getLogger(__name__)

ClientProvider = Callable[[], IDeliveryClient]
Job = Callable[[UnitOfWork, ClientProvider], Awaitable[Result]]


async def process_email_queue(uow: UnitOfWork, client: ClientProvider) -> Result:
    return await ProcessEmailQueueUseCase(uow, client()).execute(
        ApplicationConfig.EMAIL_QUEUE_BATCH_SIZE
    )


async def process_push_queue(uow: UnitOfWork, client: ClientProvider) -> Result:
    return await ProcessPushQueueUseCase(uow, client()).execute(
        ApplicationConfig.PUSH_QUEUE_BATCH_SIZE
    )


async def retry_failed_notifications(uow: UnitOfWork, client: ClientProvider) -> Result:
    return await RetryFailedNotificationsUseCase(uow).execute()


async def cleanup_old_notifications(uow: UnitOfWork, client: ClientProvider) -> Result:
    return await CleanupOldNotificationsUseCase(uow).execute()


async def expire_invitations(uow: UnitOfWork, client: ClientProvider) -> Result:
    return await CleanupExpiredInvitationsUseCase(uow).execute()


async def cleanup_inactive_subscriptions(
    uow: UnitOfWork, client: ClientProvider
) -> Result:
    return await CleanupInactiveSubscriptionsUseCase(uow).execute()


JOBS: Dict[str, Job] = {
    "process-email-queue": process_email_queue,
    "process-push-queue": process_push_queue,
    "retry-failed-notifications": retry_failed_notifications,
    "cleanup-old-notifications": cleanup_old_notifications,
    "expire-invitations": expire_invitations,
    "cleanup-inactive-subscriptions": cleanup_inactive_subscriptions,
}


async def run_job(name: str, uow: UnitOfWork, client: ClientProvider) -> Result:
    job = JOBS.get(name)
    if job is None:
        return Return.err(Error("NOT_FOUND", f"Unknown job: {name}"))

    result = await job(uow, client)
    if result.is_ok():
        logger.info("Job %s finished: %s", name, result.value)
    else:
        logger.warning("Job %s failed: %s", name, result.error.code)
    return result
