"""
Create System Notification Use Case

Operator broadcast to a list of users. System notifications bypass the
email preference and are never suppressed.
"""

import logging
from typing import List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.services.notification_engine import NotificationEngine
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import NotificationPriority, NotificationType

from .dtos import SystemNotificationResponse

logger = logging.getLogger(__name__)


class CreateSystemNotificationUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_ids: List[UUID],
        message: str,
        priority: NotificationPriority = NotificationPriority.medium,
        data: Optional[dict] = None,
    ) -> Result[SystemNotificationResponse]:
        if not user_ids or not (message or "").strip():
            return Return.err(
                Error("INVALID_INPUT", "At least one user and a message are required")
            )

        async with self.uow:
            try:
                users = await self.uow.users.get_by_ids(user_ids)
                missing = [str(u) for u in user_ids if u not in users]
                if missing:
                    return Return.err(
                        Error("NOT_FOUND", "Unknown users", {"user_ids": missing})
                    )

                engine = NotificationEngine(self.uow)
                created = []
                for user_id in dict.fromkeys(user_ids):
                    notification = await engine.create_notification(
                        user_id=user_id,
                        type=NotificationType.system,
                        template_args=[message],
                        data=data,
                        priority=priority,
                    )
                    created.append(str(notification.id))
                await self.uow.commit()
            except Exception as exc:
                logger.exception("Failed to create system notifications")
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "PROCESSING_ERROR",
                        "Failed to create notifications",
                        {"error": str(exc)},
                    )
                )

        return Return.ok(
            SystemNotificationResponse(created=len(created), notification_ids=created)
        )
