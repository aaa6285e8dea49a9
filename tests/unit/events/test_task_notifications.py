from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from conpanion.app.events import TaskCommentAdded, TaskMetadataChanged
from conpanion.app.events.handlers.tasks import (
    notify_task_comment_added,
    notify_task_metadata_changed,
)
from conpanion.domain.entities import NotificationPriority, NotificationType, Task, User


@pytest.fixture
def task_uow(mock_uow):
    commenter = User(id=uuid4(), email="cara@example.com", password_hash="x", first_name="Cara")
    task = Task(id=uuid4(), project_id=uuid4(), title="Install windows")

    mock_uow.users = MagicMock()
    mock_uow.users.get_by_id = AsyncMock(return_value=commenter)
    mock_uow.tasks = MagicMock()
    mock_uow.tasks.get_by_id = AsyncMock(return_value=task)
    mock_uow.assignees = MagicMock()
    mock_uow.assignees.list_user_ids = AsyncMock(return_value=[])

    mock_uow.commenter = commenter
    mock_uow.task = task
    return mock_uow


@pytest.fixture
def engine():
    with patch("conpanion.app.events.handlers.tasks.NotificationEngine") as engine_class:
        engine_class.return_value.create_notification = AsyncMock()
        yield engine_class.return_value


def _calls(engine):
    return [call.kwargs for call in engine.create_notification.await_args_list]


@pytest.mark.asyncio
async def test_comment_notifies_assignees_and_mentioned_users(task_uow, engine):
    """
    Given a task with two assignees, one of them the commenter
    When the comment mentions the commenter, a teammate and an unknown id
    Then the other assignee gets task_comment and the teammate comment_mention
    """
    # Arrange
    commenter = task_uow.commenter.id
    assignee = uuid4()
    teammate = uuid4()
    stranger = uuid4()
    task_uow.assignees.list_user_ids = AsyncMock(return_value=[commenter, assignee])
    task_uow.users.get_by_ids = AsyncMock(return_value={teammate: MagicMock()})
    content = f"@[{commenter}] @[{teammate}] @[{stranger}] check the sills " + "x" * 200

    # Act
    await notify_task_comment_added(
        task_uow,
        TaskCommentAdded(
            comment_id=uuid4(), task_id=task_uow.task.id, user_id=commenter, content=content
        ),
    )

    # Assert
    calls = _calls(engine)
    assert [(c["user_id"], c["type"]) for c in calls] == [
        (assignee, NotificationType.task_comment),
        (teammate, NotificationType.comment_mention),
    ]
    assert calls[0]["priority"] == NotificationPriority.medium
    assert calls[1]["priority"] == NotificationPriority.high
    assert calls[0]["template_args"] == ["Cara", "Install windows"]
    assert len(calls[0]["data"]["comment_preview"]) == 100
    task_uow.users.get_by_ids.assert_awaited_once_with([teammate, stranger])


@pytest.mark.asyncio
async def test_metadata_change_skips_the_actor(task_uow, engine):
    # Arrange
    actor = task_uow.commenter.id
    assignee = uuid4()
    task_uow.assignees.list_user_ids = AsyncMock(return_value=[actor, assignee])

    # Act
    await notify_task_metadata_changed(
        task_uow,
        TaskMetadataChanged(
            task_id=task_uow.task.id,
            changed_by=actor,
            key="crane",
            action="added",
            new_value="Liebherr 280",
        ),
    )

    # Assert
    calls = _calls(engine)
    assert [c["user_id"] for c in calls] == [assignee]
    assert calls[0]["type"] == NotificationType.task_updated
    assert calls[0]["template_name"] == "metadata_change"
    assert calls[0]["priority"] == NotificationPriority.low
    assert calls[0]["template_args"] == ["Cara", "Install windows"]
    assert calls[0]["data"]["change_summary"] == 'added metadata "crane"'


@pytest.mark.asyncio
async def test_metadata_change_by_only_assignee_is_silent(task_uow, engine):
    actor = task_uow.commenter.id
    task_uow.assignees.list_user_ids = AsyncMock(return_value=[actor])

    await notify_task_metadata_changed(
        task_uow,
        TaskMetadataChanged(
            task_id=task_uow.task.id, changed_by=actor, key="crane", action="removed"
        ),
    )

    engine.create_notification.assert_not_awaited()
