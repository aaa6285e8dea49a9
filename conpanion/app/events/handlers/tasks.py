import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple
from uuid import UUID

from conpanion.app.events.events import TaskCommentAdded, TaskMetadataChanged, TaskUpdated
from conpanion.app.services.notification_engine import NotificationEngine
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import EntityKind, NotificationPriority, NotificationType
from conpanion.domain.entity_ref import EntityRef

from .common import actor_name, recipients_excluding

TRACKED_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "project_id",
    "parent_task_id",
)
URGENT_FIELDS = ("status", "due_date")

MENTION_PATTERN = re.compile(
    r"@\[([0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})\]"
)
COMMENT_PREVIEW_LENGTH = 100


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def describe_task_changes(
    old: Mapping[str, Any],
    new: Mapping[str, Any],
    labels: Optional[Mapping[UUID, str]] = None,
) -> Tuple[List[str], Dict[str, Any], Dict[str, Any]]:
    """
    Build the human-readable change list between two task snapshots.

    ``labels`` maps project and parent task ids to display names. Audit
    timestamps are never reported.

    Returns:
        (changes, old_values, new_values) restricted to changed fields
    """
    labels = labels or {}
    changes: List[str] = []
    old_values: Dict[str, Any] = {}
    new_values: Dict[str, Any] = {}

    for field in TRACKED_FIELDS:
        before, after = old.get(field), new.get(field)
        if before == after:
            continue
        old_values[field] = before
        new_values[field] = after

        if field == "title":
            changes.append(f'title changed from "{before}" to "{after}"')
        elif field == "description":
            changes.append("description updated")
        elif field in ("status", "priority"):
            changes.append(f"{field} changed from {before} to {after}")
        elif field == "due_date":
            if after is None:
                changes.append("due date removed")
            elif before is None:
                changes.append(f"due date set to {_format_date(after)}")
            else:
                changes.append(
                    f"due date changed from {_format_date(before)} to {_format_date(after)}"
                )
        elif field == "project_id":
            changes.append(
                f'moved from project "{labels.get(before, "Unknown")}" '
                f'to "{labels.get(after, "Unknown")}"'
            )
        elif field == "parent_task_id":
            if after is None:
                changes.append("removed from parent task")
            elif before is None:
                changes.append(f'set as subtask of "{labels.get(after, "Unknown")}"')
            else:
                changes.append(
                    f'parent task changed from "{labels.get(before, "Unknown")}" '
                    f'to "{labels.get(after, "Unknown")}"'
                )

    return changes, old_values, new_values


async def _labels_for(uow: UnitOfWork, old: Mapping, new: Mapping) -> Dict[UUID, str]:
    labels: Dict[UUID, str] = {}
    for snapshot in (old, new):
        project_id = snapshot.get("project_id")
        if project_id and project_id not in labels:
            project = await uow.projects.get_by_id(project_id)
            if project:
                labels[project_id] = project.name
        parent_id = snapshot.get("parent_task_id")
        if parent_id and parent_id not in labels:
            parent = await uow.tasks.get_by_id(parent_id)
            if parent:
                labels[parent_id] = parent.title
    return labels


async def notify_task_updated(uow: UnitOfWork, event: TaskUpdated) -> None:
    labels = await _labels_for(uow, event.old_values, event.new_values)
    changes, old_values, new_values = describe_task_changes(
        event.old_values, event.new_values, labels
    )
    if not changes:
        return

    task = await uow.tasks.get_by_id(event.task_id)
    if task is None:
        return
    assignees = recipients_excluding(
        await uow.assignees.list_user_ids(EntityKind.task, task.id), event.updated_by
    )
    if not assignees:
        return

    updater = await actor_name(uow, event.updated_by)
    priority = (
        NotificationPriority.high
        if any(field in new_values for field in URGENT_FIELDS)
        else NotificationPriority.medium
    )
    data = {
        "task_id": str(task.id),
        "task_title": task.title,
        "updated_by": updater,
        "changes": changes,
        "change_summary": ", ".join(changes),
        "old_values": old_values,
        "new_values": new_values,
    }

    engine = NotificationEngine(uow)
    for user_id in assignees:
        await engine.create_notification(
            user_id=user_id,
            type=NotificationType.task_updated,
            template_args=[task.title, updater],
            data=data,
            entity_ref=EntityRef(EntityKind.task, task.id),
            priority=priority,
            created_by=event.updated_by,
        )


async def notify_task_metadata_changed(
    uow: UnitOfWork, event: TaskMetadataChanged
) -> None:
    task = await uow.tasks.get_by_id(event.task_id)
    if task is None:
        return
    assignees = recipients_excluding(
        await uow.assignees.list_user_ids(EntityKind.task, task.id), event.changed_by
    )
    if not assignees:
        return

    actor = await actor_name(uow, event.changed_by)
    data = {
        "task_id": str(task.id),
        "task_title": task.title,
        "metadata_key": event.key,
        "action": event.action,
        "old_value": event.old_value,
        "new_value": event.new_value,
        "change_summary": f'{event.action} metadata "{event.key}"',
    }

    engine = NotificationEngine(uow)
    for user_id in assignees:
        await engine.create_notification(
            user_id=user_id,
            type=NotificationType.task_updated,
            template_name="metadata_change",
            template_args=[actor, task.title],
            data=data,
            entity_ref=EntityRef(EntityKind.task, task.id),
            priority=NotificationPriority.low,
            created_by=event.changed_by,
        )


def extract_mentions(content: str) -> List[UUID]:
    """User ids mentioned as @[uuid], in order of first appearance"""
    mentioned: List[UUID] = []
    for match in MENTION_PATTERN.finditer(content or ""):
        user_id = UUID(match.group(1))
        if user_id not in mentioned:
            mentioned.append(user_id)
    return mentioned


async def notify_task_comment_added(uow: UnitOfWork, event: TaskCommentAdded) -> None:
    task = await uow.tasks.get_by_id(event.task_id)
    if task is None:
        return

    commenter = await actor_name(uow, event.user_id)
    data = {
        "task_id": str(task.id),
        "task_title": task.title,
        "comment_id": str(event.comment_id),
        "comment_preview": event.content[:COMMENT_PREVIEW_LENGTH],
        "commenter": commenter,
    }
    ref = EntityRef(EntityKind.task, task.id)
    engine = NotificationEngine(uow)

    assignees = recipients_excluding(
        await uow.assignees.list_user_ids(EntityKind.task, task.id), event.user_id
    )
    for user_id in assignees:
        await engine.create_notification(
            user_id=user_id,
            type=NotificationType.task_comment,
            template_args=[commenter, task.title],
            data=data,
            entity_ref=ref,
            priority=NotificationPriority.medium,
            created_by=event.user_id,
        )

    mentioned = recipients_excluding(extract_mentions(event.content), event.user_id)
    known_users = await uow.users.get_by_ids(mentioned)
    for user_id in mentioned:
        if user_id not in known_users:
            continue
        await engine.create_notification(
            user_id=user_id,
            type=NotificationType.comment_mention,
            template_args=[commenter, task.title],
            data=data,
            entity_ref=ref,
            priority=NotificationPriority.high,
            created_by=event.user_id,
        )
