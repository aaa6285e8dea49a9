from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from conpanion.app.events import (
    ApprovalCommentAdded,
    ApprovalCreated,
    ApprovalResponseAdded,
    ApprovalStatusChanged,
)
from conpanion.app.events.handlers.approvals import (
    approval_priority,
    notify_approval_comment_added,
    notify_approval_created,
    notify_approval_response_added,
    notify_approval_status_changed,
)
from conpanion.domain.entities import (
    Approval,
    ApprovalStatus,
    NotificationPriority,
    NotificationType,
    User,
)

NOW = datetime(2026, 6, 1, 12, 0)


def test_priority_rises_as_due_date_approaches():
    assert approval_priority(None, NOW) == NotificationPriority.medium
    assert approval_priority(NOW + timedelta(hours=12), NOW) == NotificationPriority.critical
    assert approval_priority(NOW + timedelta(days=2), NOW) == NotificationPriority.high
    assert approval_priority(NOW + timedelta(days=10), NOW) == NotificationPriority.medium
    assert approval_priority(NOW - timedelta(days=1), NOW) == NotificationPriority.critical


@pytest.fixture
def approval_uow(mock_uow):
    requester = User(id=uuid4(), email="req@example.com", password_hash="x", first_name="Rita")
    approval = Approval(requester_id=requester.id)

    mock_uow.approvals = MagicMock()
    mock_uow.approvals.get_by_id = AsyncMock(return_value=approval)
    mock_uow.approvals.list_approver_ids = AsyncMock(return_value=[])
    mock_uow.users = MagicMock()
    mock_uow.users.get_by_id = AsyncMock(return_value=requester)
    mock_uow.approval = approval
    return mock_uow


@pytest.fixture
def engine():
    with patch("conpanion.app.events.handlers.approvals.NotificationEngine") as engine_class:
        engine_class.return_value.create_notification = AsyncMock()
        yield engine_class.return_value


@pytest.mark.asyncio
async def test_requester_who_is_also_approver_gets_only_confirmation(approval_uow, engine):
    # Arrange
    approval = approval_uow.approval
    other = uuid4()
    approval_uow.approvals.list_approver_ids = AsyncMock(
        return_value=[approval.requester_id, other]
    )

    # Act
    await notify_approval_created(
        approval_uow, ApprovalCreated(approval_id=approval.id, created_by=approval.requester_id)
    )

    # Assert
    calls = [call.kwargs for call in engine.create_notification.await_args_list]
    assert [(c["user_id"], c.get("template_name", "default")) for c in calls] == [
        (approval.requester_id, "requester_confirmation"),
        (other, "default"),
    ]
    assert calls[0]["template_args"] == ["General Approval"]
    assert calls[1]["template_args"] == ["Rita", "General Approval"]
    assert all(c["type"] == NotificationType.approval_requested for c in calls)


@pytest.mark.asyncio
async def test_status_change_notifies_requester_and_other_approvers(approval_uow, engine):
    # Arrange
    approval = approval_uow.approval
    actor, bystander = uuid4(), uuid4()
    approval_uow.approvals.list_approver_ids = AsyncMock(return_value=[actor, bystander])

    # Act
    await notify_approval_status_changed(
        approval_uow,
        ApprovalStatusChanged(
            approval_id=approval.id,
            old_status=ApprovalStatus.pending,
            new_status=ApprovalStatus.revision_requested,
            changed_by=actor,
        ),
    )

    # Assert
    calls = [call.kwargs for call in engine.create_notification.await_args_list]
    assert [c["user_id"] for c in calls] == [approval.requester_id, bystander]
    assert calls[0]["priority"] == NotificationPriority.high
    assert calls[0]["template_args"][1] == "sent back for revision"
    assert calls[1]["template_name"] == "approver_update"
    assert calls[1]["priority"] == NotificationPriority.medium


@pytest.mark.asyncio
async def test_missing_approval_notifies_nobody(approval_uow, engine):
    approval_uow.approvals.get_by_id = AsyncMock(return_value=None)

    await notify_approval_created(
        approval_uow, ApprovalCreated(approval_id=uuid4(), created_by=uuid4())
    )

    engine.create_notification.assert_not_called()


@pytest.mark.asyncio
async def test_response_notifies_requester_and_other_approvers_but_not_responder(
    approval_uow, engine
):
    """
    Given an approval with two approvers
    When one of them responds
    Then the requester gets response_received, the other approver gets
    response_notification, and the responder gets nothing
    """
    # Arrange
    approval = approval_uow.approval
    responder, other = uuid4(), uuid4()
    approval_uow.approvals.list_approver_ids = AsyncMock(return_value=[responder, other])

    # Act
    await notify_approval_response_added(
        approval_uow,
        ApprovalResponseAdded(
            response_id=uuid4(),
            approval_id=approval.id,
            approver_id=responder,
            status=ApprovalStatus.revision_requested,
        ),
    )

    # Assert
    calls = [call.kwargs for call in engine.create_notification.await_args_list]
    assert [(c["user_id"], c["template_name"]) for c in calls] == [
        (approval.requester_id, "response_received"),
        (other, "response_notification"),
    ]
    assert calls[0]["type"] == NotificationType.approval_status_changed
    assert calls[0]["template_args"] == ["Rita", "General Approval"]
    assert calls[1]["template_args"] == [
        "Rita",
        "General Approval",
        "sent back for revision",
    ]
    assert responder not in [c["user_id"] for c in calls]


@pytest.mark.asyncio
async def test_requester_responding_to_own_approval_notifies_only_others(
    approval_uow, engine
):
    approval = approval_uow.approval
    other = uuid4()
    approval_uow.approvals.list_approver_ids = AsyncMock(
        return_value=[approval.requester_id, other]
    )

    await notify_approval_response_added(
        approval_uow,
        ApprovalResponseAdded(
            response_id=uuid4(),
            approval_id=approval.id,
            approver_id=approval.requester_id,
            status=ApprovalStatus.approved,
        ),
    )

    calls = [call.kwargs for call in engine.create_notification.await_args_list]
    assert [c["user_id"] for c in calls] == [other]


@pytest.mark.asyncio
async def test_comment_reaches_everyone_but_the_commenter(approval_uow, engine):
    # Arrange
    approval = approval_uow.approval
    commenter, other = uuid4(), uuid4()
    approval_uow.approvals.list_approver_ids = AsyncMock(return_value=[commenter, other])
    comment = "Please attach the revised load calculations. " * 5

    # Act
    await notify_approval_comment_added(
        approval_uow,
        ApprovalCommentAdded(
            comment_id=uuid4(),
            approval_id=approval.id,
            user_id=commenter,
            comment=comment,
        ),
    )

    # Assert
    calls = [call.kwargs for call in engine.create_notification.await_args_list]
    assert [c["user_id"] for c in calls] == [approval.requester_id, other]
    assert all(c["template_name"] == "comment_notification" for c in calls)
    assert calls[0]["template_args"] == ["Rita", "General Approval", comment[:100]]
