import logging

from conpanion.app.events.events import EntityAssigned, EntityUnassigned
from conpanion.app.services.entity_titles import resolve_entity_title
from conpanion.app.services.notification_engine import NotificationEngine
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import EntityKind, NotificationPriority, NotificationType

from .common import actor_name

logger = logging.getLogger(__name__)

ASSIGNED_TYPES = {
    EntityKind.task: NotificationType.task_assigned,
    EntityKind.form: NotificationType.form_assigned,
}

UNASSIGNED_TYPES = {
    EntityKind.task: NotificationType.task_unassigned,
    EntityKind.form: NotificationType.form_unassigned,
}


async def _assignment_context(uow: UnitOfWork, event) -> dict:
    entity = event.entity
    data = {
        "entity_type": entity.kind.value,
        "entity_id": str(entity.id),
    }
    if entity.kind == EntityKind.task:
        task = await uow.tasks.get_by_id(entity.id)
        if task is not None:
            project = await uow.projects.get_by_id(task.project_id)
            data.update(
                {
                    "task_id": str(task.id),
                    "task_title": task.title,
                    "project_id": str(task.project_id),
                    "project_name": project.name if project else None,
                    "due_date": task.due_date.isoformat() if task.due_date else None,
                }
            )
    return data


async def notify_entity_assigned(uow: UnitOfWork, event: EntityAssigned) -> None:
    if event.assigned_by == event.user_id:
        return

    title = await resolve_entity_title(uow, event.entity)
    assigner = await actor_name(uow, event.assigned_by)
    data = await _assignment_context(uow, event)
    data.update({"entity_title": title, "assigned_by": assigner})

    priority = NotificationPriority.medium
    if event.entity.kind == EntityKind.task:
        priority = NotificationPriority.high

    await NotificationEngine(uow).create_notification(
        user_id=event.user_id,
        type=ASSIGNED_TYPES.get(event.entity.kind, NotificationType.entity_assigned),
        template_args=[assigner, title],
        data=data,
        entity_ref=event.entity,
        priority=priority,
        created_by=event.assigned_by,
    )


async def notify_entity_unassigned(uow: UnitOfWork, event: EntityUnassigned) -> None:
    notification_type = UNASSIGNED_TYPES.get(event.entity.kind)
    if notification_type is None:
        logger.debug("No unassignment notification for %s", event.entity.kind.value)
        return
    if event.unassigned_by == event.user_id:
        return

    title = await resolve_entity_title(uow, event.entity)
    unassigner = await actor_name(uow, event.unassigned_by)
    data = await _assignment_context(uow, event)
    data.update({"entity_title": title, "unassigned_by": unassigner})

    await NotificationEngine(uow).create_notification(
        user_id=event.user_id,
        type=notification_type,
        template_args=[title, unassigner],
        data=data,
        entity_ref=event.entity,
        priority=NotificationPriority.low,
        created_by=event.unassigned_by,
    )
