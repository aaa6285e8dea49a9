from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from conpanion.app.events import EntityAssigned, EntityUnassigned
from conpanion.app.events.handlers.assignments import (
    notify_entity_assigned,
    notify_entity_unassigned,
)
from conpanion.domain.entities import (
    EntityKind,
    Form,
    NotificationPriority,
    NotificationType,
    Project,
    Task,
    User,
)
from conpanion.domain.entity_ref import EntityRef


@pytest.fixture
def work_uow(mock_uow):
    manager = User(id=uuid4(), email="manager@example.com", password_hash="x", first_name="Maya")
    project = Project(id=uuid4(), organization_id=uuid4(), name="Tower A")
    task = Task(
        id=uuid4(),
        project_id=project.id,
        title="Pour slab",
        due_date=datetime(2026, 7, 1, 9, 0),
    )
    form = Form(id=uuid4(), project_id=project.id, name="Daily safety check")

    mock_uow.users = MagicMock()
    mock_uow.users.get_by_id = AsyncMock(return_value=manager)
    mock_uow.projects = MagicMock()
    mock_uow.projects.get_by_id = AsyncMock(return_value=project)
    mock_uow.tasks = MagicMock()
    mock_uow.tasks.get_by_id = AsyncMock(return_value=task)
    mock_uow.forms = MagicMock()
    mock_uow.forms.get_by_id = AsyncMock(return_value=form)
    mock_uow.notifications = MagicMock()
    mock_uow.notifications.create = AsyncMock()

    mock_uow.manager = manager
    mock_uow.task = task
    mock_uow.form = form
    return mock_uow


@pytest.fixture
def engine():
    with patch("conpanion.app.events.handlers.assignments.NotificationEngine") as engine_class:
        engine_class.return_value.create_notification = AsyncMock()
        yield engine_class.return_value


@pytest.mark.asyncio
async def test_task_assignment_notifies_assignee(work_uow, engine):
    # Arrange
    worker = uuid4()
    event = EntityAssigned(
        entity=EntityRef(EntityKind.task, work_uow.task.id),
        user_id=worker,
        assigned_by=work_uow.manager.id,
    )

    # Act
    await notify_entity_assigned(work_uow, event)

    # Assert
    engine.create_notification.assert_awaited_once()
    kwargs = engine.create_notification.await_args.kwargs
    assert kwargs["user_id"] == worker
    assert kwargs["type"] == NotificationType.task_assigned
    assert kwargs["priority"] == NotificationPriority.high
    assert kwargs["template_args"] == ["Maya", "Pour slab"]
    assert kwargs["data"]["project_name"] == "Tower A"
    assert kwargs["data"]["due_date"] == "2026-07-01T09:00:00"


@pytest.mark.asyncio
async def test_form_assignment_is_medium_priority(work_uow, engine):
    event = EntityAssigned(
        entity=EntityRef(EntityKind.form, work_uow.form.id),
        user_id=uuid4(),
        assigned_by=work_uow.manager.id,
    )

    await notify_entity_assigned(work_uow, event)

    kwargs = engine.create_notification.await_args.kwargs
    assert kwargs["type"] == NotificationType.form_assigned
    assert kwargs["priority"] == NotificationPriority.medium
    assert kwargs["template_args"] == ["Maya", "Daily safety check"]


@pytest.mark.asyncio
async def test_task_unassignment_notifies_with_low_priority(work_uow, engine):
    worker = uuid4()
    event = EntityUnassigned(
        entity=EntityRef(EntityKind.task, work_uow.task.id),
        user_id=worker,
        unassigned_by=work_uow.manager.id,
    )

    await notify_entity_unassigned(work_uow, event)

    kwargs = engine.create_notification.await_args.kwargs
    assert kwargs["user_id"] == worker
    assert kwargs["type"] == NotificationType.task_unassigned
    assert kwargs["priority"] == NotificationPriority.low
    assert kwargs["template_args"] == ["Pour slab", "Maya"]


@pytest.mark.asyncio
async def test_unassignment_from_site_diary_is_silent(work_uow, engine):
    event = EntityUnassigned(
        entity=EntityRef(EntityKind.site_diary, uuid4()),
        user_id=uuid4(),
        unassigned_by=work_uow.manager.id,
    )

    await notify_entity_unassigned(work_uow, event)

    engine.create_notification.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", [EntityKind.task, EntityKind.form])
async def test_self_assignment_creates_no_notification(work_uow, kind):
    """
    Given a user assigns or unassigns themselves
    When the handlers run with the real engine
    Then nothing is written for them
    """
    # Arrange
    me = work_uow.manager.id
    entity_id = work_uow.task.id if kind == EntityKind.task else work_uow.form.id
    entity = EntityRef(kind, entity_id)

    # Act
    await notify_entity_assigned(
        work_uow, EntityAssigned(entity=entity, user_id=me, assigned_by=me)
    )
    await notify_entity_unassigned(
        work_uow, EntityUnassigned(entity=entity, user_id=me, unassigned_by=me)
    )

    # Assert
    work_uow.notifications.create.assert_not_awaited()
