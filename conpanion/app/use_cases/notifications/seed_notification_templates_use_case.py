"""
Seed Notification Templates Use Case

Inserts the default template set, leaving existing (type, name) rows alone.
"""

import logging

from libs.result import Result, Return
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.templates import DEFAULT_TEMPLATES

from .dtos import SeedTemplatesResponse

logger = logging.getLogger(__name__)


class SeedNotificationTemplatesUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[SeedTemplatesResponse]:
        async with self.uow:
            created = await self.uow.templates.create_missing(DEFAULT_TEMPLATES)
            await self.uow.commit()

        if created:
            logger.info("Seeded %d notification templates", created)
        return Return.ok(SeedTemplatesResponse(created=created))
