"""
Notification Engine

Single entry point through which every notification is created. Renders the
template, persists the in-app notification and queues email/push according
to the recipient's preferences.
"""

import logging
from datetime import datetime
from typing import Any, Optional, Sequence, Tuple, Union
from uuid import UUID

from pydantic_core import to_jsonable_python

from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    DeliveryChannel,
    DeliveryStatus,
    EmailQueueEntry,
    Notification,
    NotificationDelivery,
    NotificationPreference,
    NotificationPriority,
    NotificationSettings,
    NotificationType,
    PushQueueEntry,
    User,
)
from conpanion.domain.entities.delivery_queue import email_scheduled_for
from conpanion.domain.entities.notification import MESSAGE_MAX_LENGTH, TITLE_MAX_LENGTH
from conpanion.domain.entity_ref import EntityRef
from conpanion.domain.templates import (
    DEFAULT_TEMPLATE_NAME,
    FALLBACK_MESSAGE,
    FALLBACK_SUBJECT,
    render_template,
)

logger = logging.getLogger(__name__)

REQUESTER_CONFIRMATION_TEMPLATE = "requester_confirmation"


class _Suppressed:
    """Returned instead of a Notification when nothing was created"""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "SUPPRESSED"


SUPPRESSED = _Suppressed()


def is_self_notification(
    user_id: UUID,
    type: NotificationType,
    template_name: str,
    created_by: Optional[UUID],
) -> bool:
    """
    True when the actor would be notified about their own action.

    System notifications and the approval requester confirmation are
    always delivered.
    """
    if created_by is None or created_by != user_id:
        return False
    if type == NotificationType.system:
        return False
    if (
        type == NotificationType.approval_requested
        and template_name == REQUESTER_CONFIRMATION_TEMPLATE
    ):
        return False
    return True


class NotificationEngine:
    """
    Creates notifications and fans them out to delivery channels.

    Business Rules:
    - Self notifications are suppressed before anything is written
    - The in-app notification always persists, even if queuing email/push fails
    - System notifications always email
    - Push respects the global switch, per-type preference and quiet hours
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def create_notification(
        self,
        user_id: UUID,
        type: NotificationType,
        template_name: str = DEFAULT_TEMPLATE_NAME,
        template_args: Optional[Sequence[Any]] = None,
        data: Optional[dict] = None,
        entity_ref: Optional[EntityRef] = None,
        priority: NotificationPriority = NotificationPriority.medium,
        created_by: Optional[UUID] = None,
    ) -> Union[Notification, _Suppressed]:
        """
        Create a notification for one recipient.

        Args:
            user_id: Recipient
            type: Notification type
            template_name: Template name within the type
            template_args: Positional template arguments (at most 5 are used)
            data: JSON context stored on the notification
            entity_ref: Entity the notification is about
            priority: Drives email scheduling delay
            created_by: Acting user, used for self-notification suppression

        Returns:
            The persisted Notification, or SUPPRESSED
        """
        if is_self_notification(user_id, type, template_name, created_by):
            logger.debug(
                "Suppressed %s notification to user %s about their own action",
                type.value,
                user_id,
            )
            return SUPPRESSED

        recipient = await self.uow.users.get_by_id(user_id)
        if recipient is None:
            raise LookupError(f"Notification recipient {user_id} does not exist")

        now = utcnow()
        title, message = await self.render(type, template_name, template_args)

        notification = await self.uow.notifications.create(
            Notification(
                user_id=user_id,
                type=type,
                priority=priority,
                title=title,
                message=message,
                data=to_jsonable_python(data or {}),
                entity_type=entity_ref.kind if entity_ref else None,
                entity_id=entity_ref.id if entity_ref else None,
                created_by=created_by,
                created_at=now,
                updated_at=now,
            )
        )
        await self.uow.deliveries.create(
            NotificationDelivery(
                notification_id=notification.id,
                channel=DeliveryChannel.realtime,
                status=DeliveryStatus.sent,
                delivered_at=now,
            )
        )

        preference = await self.get_or_create_preference(user_id, type)
        settings = await self.get_or_create_settings(user_id)

        if type == NotificationType.system or (
            settings.notifications_enabled and preference.email_enabled
        ):
            await self._enqueue_safely(
                DeliveryChannel.email, notification, self._queue_email, recipient, now
            )

        if (
            settings.notifications_enabled
            and preference.push_enabled
            and not settings.in_quiet_hours(now)
        ):
            await self._enqueue_safely(
                DeliveryChannel.push, notification, self._queue_push, now
            )

        return notification

    async def render(
        self,
        type: NotificationType,
        template_name: str,
        template_args: Optional[Sequence[Any]],
    ) -> Tuple[str, str]:
        """Resolve the template through the fallback chain and fill it in"""
        name = template_name or DEFAULT_TEMPLATE_NAME
        template = await self.uow.templates.get_active(type, name)
        if template is None and name != DEFAULT_TEMPLATE_NAME:
            template = await self.uow.templates.get_active(type, DEFAULT_TEMPLATE_NAME)
        if template is None:
            return FALLBACK_SUBJECT, FALLBACK_MESSAGE

        title = render_template(template.subject_template, template_args)
        message = render_template(template.message_template, template_args)
        return title[:TITLE_MAX_LENGTH], message[:MESSAGE_MAX_LENGTH]

    async def get_or_create_preference(
        self, user_id: UUID, type: NotificationType
    ) -> NotificationPreference:
        preference = await self.uow.preferences.get(user_id, type)
        if preference is None:
            preference = await self.uow.preferences.create(
                NotificationPreference(user_id=user_id, type=type)
            )
        return preference

    async def get_or_create_settings(self, user_id: UUID) -> NotificationSettings:
        settings = await self.uow.notification_settings.get(user_id)
        if settings is None:
            settings = await self.uow.notification_settings.create(
                NotificationSettings(user_id=user_id)
            )
        return settings

    async def _enqueue_safely(
        self, channel: DeliveryChannel, notification: Notification, enqueue, *args
    ) -> None:
        try:
            async with self.uow.savepoint():
                await enqueue(notification, *args)
        except Exception:
            logger.exception(
                "Failed to queue %s delivery for notification %s",
                channel.value,
                notification.id,
            )

    async def _queue_email(
        self, notification: Notification, recipient: User, now: datetime
    ) -> None:
        await self.uow.email_queue.create(
            EmailQueueEntry(
                notification_id=notification.id,
                user_id=recipient.id,
                to_email=recipient.email,
                to_name=recipient.display_name,
                subject=notification.title,
                template_id=f"{notification.type.value}_template",
                template_data={
                    "user_name": recipient.display_name,
                    "notification_title": notification.title,
                    "notification_message": notification.message,
                    "notification_data": notification.data,
                    "action_url": f"/notifications/{notification.id}",
                },
                priority=notification.priority,
                scheduled_for=email_scheduled_for(notification.priority, now),
            )
        )

    async def _queue_push(self, notification: Notification, now: datetime) -> None:
        subscriptions = await self.uow.push_subscriptions.list_for_user(
            notification.user_id, push_enabled_only=True
        )
        for subscription in subscriptions:
            await self.uow.push_queue.create(
                PushQueueEntry(
                    notification_id=notification.id,
                    user_id=notification.user_id,
                    subscription_id=subscription.id,
                    platform=subscription.platform,
                    token=subscription.endpoint,
                    payload={
                        "title": notification.title,
                        "body": notification.message,
                        "data": notification.data,
                        "badge": 1,
                        "sound": "default",
                        "click_action": f"/notifications/{notification.id}",
                    },
                    priority=notification.priority,
                    scheduled_for=now,
                )
            )
