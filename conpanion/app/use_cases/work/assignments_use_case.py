"""
Form and Assignment Use Cases
"""

from typing import List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from conpanion.app.events import EntityAssigned, EntityUnassigned, EventBus, default_event_bus
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import EntityAssignee, EntityKind, Form
from conpanion.domain.entity_ref import EntityRef

from .access import ASSIGNABLE_KINDS, check_project_access, project_of
from .dtos import AssignmentResponse, FormResponse


class CreateFormUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self,
        user_id: UUID,
        project_id: UUID,
        name: str,
        assignee_ids: Optional[List[UUID]] = None,
    ) -> Result[FormResponse]:
        if not (name or "").strip():
            return Return.err(Error("INVALID_INPUT", "Form name is required"))

        async with self.uow:
            error = await check_project_access(self.uow, project_id, user_id)
            if error:
                return Return.err(error)

            assignees = list(dict.fromkeys(assignee_ids or []))
            known_users = await self.uow.users.get_by_ids(assignees)
            missing = [str(a) for a in assignees if a not in known_users]
            if missing:
                return Return.err(
                    Error("NOT_FOUND", "Unknown assignees", {"user_ids": missing})
                )

            form = await self.uow.forms.create(
                Form(project_id=project_id, name=name.strip(), created_by=user_id)
            )
            for assignee_id in assignees:
                await self.uow.assignees.create(
                    EntityAssignee(
                        entity_type=EntityKind.form,
                        entity_id=form.id,
                        user_id=assignee_id,
                        assigned_by=user_id,
                    )
                )
                await self.events.publish(
                    self.uow,
                    EntityAssigned(
                        entity=EntityRef(EntityKind.form, form.id),
                        user_id=assignee_id,
                        assigned_by=user_id,
                    ),
                )

            await self.uow.commit()
            return Return.ok(
                FormResponse(
                    id=str(form.id),
                    project_id=str(project_id),
                    name=form.name,
                    assignee_ids=[str(a) for a in assignees],
                )
            )


async def _load_assignable(uow: UnitOfWork, ref: EntityRef, user_id: UUID):
    if ref.kind not in ASSIGNABLE_KINDS:
        return Error("INVALID_INPUT", f"{ref.kind.value} cannot be assigned")
    project_id = await project_of(uow, ref)
    if project_id is None:
        return Error("NOT_FOUND", f"{ref.kind.value} not found")
    return await check_project_access(uow, project_id, user_id)


class AssignEntityUseCase:
    """
    Assigns a user to a task, form, form entry or site diary.

    Business Rules:
    - The actor must belong to the entity's organization
    - A user is assigned at most once per entity
    - Self-assignment is stored but never notifies
    """

    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, actor_id: UUID, ref: EntityRef, user_id: UUID
    ) -> Result[AssignmentResponse]:
        async with self.uow:
            error = await _load_assignable(self.uow, ref, actor_id)
            if error:
                return Return.err(error)

            if await self.uow.users.get_by_id(user_id) is None:
                return Return.err(Error("NOT_FOUND", "User not found"))
            if await self.uow.assignees.get(ref.kind, ref.id, user_id):
                return Return.err(
                    Error("ALREADY_ASSIGNED", "User is already assigned")
                )

            await self.uow.assignees.create(
                EntityAssignee(
                    entity_type=ref.kind,
                    entity_id=ref.id,
                    user_id=user_id,
                    assigned_by=actor_id,
                )
            )
            await self.events.publish(
                self.uow, EntityAssigned(entity=ref, user_id=user_id, assigned_by=actor_id)
            )
            await self.uow.commit()

            return Return.ok(
                AssignmentResponse(
                    entity_type=ref.kind.value,
                    entity_id=str(ref.id),
                    user_id=str(user_id),
                    assigned=True,
                )
            )


class UnassignEntityUseCase:
    def __init__(self, uow: UnitOfWork, events: Optional[EventBus] = None):
        self.uow = uow
        self.events = events or default_event_bus()

    async def execute(
        self, actor_id: UUID, ref: EntityRef, user_id: UUID
    ) -> Result[AssignmentResponse]:
        async with self.uow:
            error = await _load_assignable(self.uow, ref, actor_id)
            if error:
                return Return.err(error)

            assignment = await self.uow.assignees.get(ref.kind, ref.id, user_id)
            if assignment is None:
                return Return.err(Error("NOT_FOUND", "User is not assigned"))

            await self.uow.assignees.delete(assignment)
            await self.events.publish(
                self.uow,
                EntityUnassigned(entity=ref, user_id=user_id, unassigned_by=actor_id),
            )
            await self.uow.commit()

            return Return.ok(
                AssignmentResponse(
                    entity_type=ref.kind.value,
                    entity_id=str(ref.id),
                    user_id=str(user_id),
                    assigned=False,
                )
            )
