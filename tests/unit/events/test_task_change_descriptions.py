from datetime import datetime
from uuid import uuid4

from conpanion.app.events.handlers.tasks import describe_task_changes, extract_mentions


def _snapshot(**values):
    base = {
        "title": "Pour slab",
        "description": "Level 2",
        "status": "todo",
        "priority": "medium",
        "due_date": None,
        "project_id": None,
        "parent_task_id": None,
    }
    base.update(values)
    return base


def test_no_changes():
    changes, old_values, new_values = describe_task_changes(_snapshot(), _snapshot())
    assert changes == []
    assert old_values == {} and new_values == {}


def test_title_status_and_description():
    changes, old_values, new_values = describe_task_changes(
        _snapshot(),
        _snapshot(title="Pour slab L2", status="in_progress", description="Updated"),
    )

    assert changes == [
        'title changed from "Pour slab" to "Pour slab L2"',
        "description updated",
        "status changed from todo to in_progress",
    ]
    assert old_values == {"title": "Pour slab", "description": "Level 2", "status": "todo"}
    assert new_values["status"] == "in_progress"


def test_due_date_transitions():
    first = datetime(2026, 5, 1, 9, 0)
    second = datetime(2026, 5, 8, 9, 0)

    set_changes, _, _ = describe_task_changes(_snapshot(), _snapshot(due_date=first))
    moved, _, _ = describe_task_changes(_snapshot(due_date=first), _snapshot(due_date=second))
    removed, _, _ = describe_task_changes(_snapshot(due_date=first), _snapshot())

    assert set_changes == ["due date set to 2026-05-01"]
    assert moved == ["due date changed from 2026-05-01 to 2026-05-08"]
    assert removed == ["due date removed"]


def test_project_move_uses_labels():
    old_project, new_project = uuid4(), uuid4()
    changes, _, _ = describe_task_changes(
        _snapshot(project_id=old_project),
        _snapshot(project_id=new_project),
        {old_project: "Tower A", new_project: "Tower B"},
    )
    assert changes == ['moved from project "Tower A" to "Tower B"']


def test_parent_task_transitions():
    parent = uuid4()
    labels = {parent: "Foundations"}

    added, _, _ = describe_task_changes(_snapshot(), _snapshot(parent_task_id=parent), labels)
    removed, _, _ = describe_task_changes(_snapshot(parent_task_id=parent), _snapshot(), labels)

    assert added == ['set as subtask of "Foundations"']
    assert removed == ["removed from parent task"]


def test_untracked_fields_are_ignored():
    changes, _, _ = describe_task_changes(
        {**_snapshot(), "updated_at": datetime(2026, 1, 1)},
        {**_snapshot(), "updated_at": datetime(2026, 1, 2)},
    )
    assert changes == []


def test_extract_mentions_deduplicates_in_order():
    first, second = uuid4(), uuid4()
    content = f"@[{first}] please check with @[{second}] and @[{first}]; @[not-a-uuid]"

    assert extract_mentions(content) == [first, second]
    assert extract_mentions("") == []
