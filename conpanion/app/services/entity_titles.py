"""
Human-readable titles for entity references.

Every EntityKind has a resolver; the table is checked for completeness at
import time so a new kind cannot be added without teaching it a title.
"""

from typing import Awaitable, Callable, Dict, Optional
from uuid import UUID

from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import EntityKind
from conpanion.domain.entity_ref import EntityRef

GENERAL_APPROVAL_TITLE = "General Approval"
UNKNOWN_ENTITY_TITLE = "Unknown Entity"

TitleResolver = Callable[[UnitOfWork, UUID], Awaitable[Optional[str]]]


async def _task_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    task = await uow.tasks.get_by_id(entity_id)
    return task.title if task else None


async def _form_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    form = await uow.forms.get_by_id(entity_id)
    return form.name if form else None


async def _form_entry_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    entry = await uow.form_entries.get_by_id(entity_id)
    return entry.name if entry else None


async def _site_diary_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    diary = await uow.site_diaries.get_by_id(entity_id)
    return diary.name if diary else None


async def _task_comment_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    comment = await uow.task_comments.get_by_id(entity_id)
    if comment is None:
        return None
    return await _task_title(uow, comment.task_id)


async def _project_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    project = await uow.projects.get_by_id(entity_id)
    return project.name if project else None


async def _organization_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    organization = await uow.organizations.get_by_id(entity_id)
    return organization.name if organization else None


async def _approval_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    approval = await uow.approvals.get_by_id(entity_id)
    if approval is None:
        return None
    target = EntityRef.from_columns(approval.entity_type, approval.entity_id)
    if target is None:
        return GENERAL_APPROVAL_TITLE
    if target.kind == EntityKind.approval:
        return UNKNOWN_ENTITY_TITLE
    return await resolve_entity_title(uow, target)


async def _approval_comment_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    comment = await uow.approvals.get_comment(entity_id)
    return await _approval_title(uow, comment.approval_id) if comment else None


async def _approval_response_title(uow: UnitOfWork, entity_id: UUID) -> Optional[str]:
    response = await uow.approvals.get_response(entity_id)
    return await _approval_title(uow, response.approval_id) if response else None


TITLE_RESOLVERS: Dict[EntityKind, TitleResolver] = {
    EntityKind.task: _task_title,
    EntityKind.form: _form_title,
    EntityKind.entries: _form_entry_title,
    EntityKind.site_diary: _site_diary_title,
    EntityKind.task_comment: _task_comment_title,
    EntityKind.project: _project_title,
    EntityKind.organization: _organization_title,
    EntityKind.approval: _approval_title,
    EntityKind.approval_comment: _approval_comment_title,
    EntityKind.approval_response: _approval_response_title,
}

_unresolved_kinds = set(EntityKind) - set(TITLE_RESOLVERS)
if _unresolved_kinds:
    raise RuntimeError(
        f"No title resolver for entity kinds: {sorted(k.value for k in _unresolved_kinds)}"
    )


async def resolve_entity_title(uow: UnitOfWork, ref: Optional[EntityRef]) -> str:
    """Title of the referenced entity; approvals without an entity are general"""
    if ref is None:
        return GENERAL_APPROVAL_TITLE
    title = await TITLE_RESOLVERS[ref.kind](uow, ref.id)
    return title or UNKNOWN_ENTITY_TITLE
