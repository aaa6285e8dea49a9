from conpanion.app.events.events import MembershipCreated
from conpanion.app.services.notification_engine import NotificationEngine
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import (
    EntityKind,
    InvitationScope,
    NotificationPriority,
    NotificationType,
)
from conpanion.domain.entity_ref import EntityRef

from .common import actor_name


async def notify_membership_created(uow: UnitOfWork, event: MembershipCreated) -> None:
    if event.added_by == event.user_id:
        return

    inviter = await actor_name(uow, event.added_by)
    if event.scope == InvitationScope.organization:
        organization = await uow.organizations.get_by_id(event.scope_id)
        scope_name = organization.name if organization else "an organization"
        notification_type = NotificationType.organization_added
        ref = EntityRef(EntityKind.organization, event.scope_id)
        data = {"organization_id": str(event.scope_id), "organization_name": scope_name}
    else:
        project = await uow.projects.get_by_id(event.scope_id)
        scope_name = project.name if project else "a project"
        notification_type = NotificationType.project_added
        ref = EntityRef(EntityKind.project, event.scope_id)
        data = {"project_id": str(event.scope_id), "project_name": scope_name}

    data.update({"role": event.role, "added_by": inviter})

    await NotificationEngine(uow).create_notification(
        user_id=event.user_id,
        type=notification_type,
        template_args=[inviter, scope_name],
        data=data,
        entity_ref=ref,
        priority=NotificationPriority.high,
        created_by=event.added_by,
    )
