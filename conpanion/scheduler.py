"""
Periodic job scheduling with APScheduler, inside the API's event loop.
"""

import logging
from typing import Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from config import ApplicationConfig
from conpanion.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from conpanion.jobs import ClientProvider, run_job

logger = logging.getLogger(__name__)


def job_triggers() -> dict:
    return {
        "process-email-queue": IntervalTrigger(
            minutes=ApplicationConfig.EMAIL_QUEUE_INTERVAL_MINUTES
        ),
        "process-push-queue": IntervalTrigger(
            minutes=ApplicationConfig.PUSH_QUEUE_INTERVAL_MINUTES
        ),
        "retry-failed-notifications": IntervalTrigger(
            minutes=ApplicationConfig.RETRY_INTERVAL_MINUTES
        ),
        "cleanup-old-notifications": CronTrigger(
            hour=ApplicationConfig.CLEANUP_HOUR, minute=0
        ),
        "expire-invitations": IntervalTrigger(
            minutes=ApplicationConfig.INVITATION_EXPIRY_INTERVAL_MINUTES
        ),
        "cleanup-inactive-subscriptions": CronTrigger(
            hour=ApplicationConfig.SUBSCRIPTION_CLEANUP_HOUR, minute=0
        ),
    }


def build_scheduler(session_factory: Callable, client: ClientProvider) -> AsyncIOScheduler:
    """
    Build (not start) the scheduler.

    Each run opens its own session. A failing run is logged and the job
    stays scheduled.
    """
    scheduler = AsyncIOScheduler()

    async def run_scheduled(name: str) -> None:
        try:
            async with session_factory() as session:
                await run_job(name, SqlAlchemyUnitOfWork(session), client)
        except Exception:
            logger.exception("Scheduled job %s crashed", name)

    for name, trigger in job_triggers().items():
        scheduler.add_job(
            run_scheduled,
            trigger,
            args=[name],
            id=name,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
    return scheduler
