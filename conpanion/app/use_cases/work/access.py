"""
Project-level access checks shared by the work domain use cases.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.invitations.scope import active_membership
from conpanion.domain.entities import EntityKind, InvitationScope
from conpanion.domain.entity_ref import EntityRef

ASSIGNABLE_KINDS = (
    EntityKind.task,
    EntityKind.form,
    EntityKind.entries,
    EntityKind.site_diary,
)


async def project_of(uow: UnitOfWork, ref: EntityRef) -> Optional[UUID]:
    """Project an entity lives in, None when it does not exist or has none"""
    if ref.kind == EntityKind.project:
        project = await uow.projects.get_by_id(ref.id)
        return project.id if project else None

    repositories = {
        EntityKind.task: uow.tasks,
        EntityKind.form: uow.forms,
        EntityKind.entries: uow.form_entries,
        EntityKind.site_diary: uow.site_diaries,
    }
    if ref.kind in repositories:
        record = await repositories[ref.kind].get_by_id(ref.id)
        return record.project_id if record else None

    if ref.kind == EntityKind.task_comment:
        comment = await uow.task_comments.get_by_id(ref.id)
        if comment is None:
            return None
        return await project_of(uow, EntityRef(EntityKind.task, comment.task_id))
    return None


async def check_project_access(
    uow: UnitOfWork, project_id: UUID, user_id: UUID
) -> Optional[Error]:
    """Error unless the user is an active member of the project's organization"""
    project = await uow.projects.get_by_id(project_id)
    if project is None:
        return Error("PROJECT_NOT_FOUND", "Project not found")
    if not await active_membership(
        uow, InvitationScope.organization, project.organization_id, user_id
    ):
        return Error("PERMISSION_DENIED", "You are not a member of this organization")
    return None
