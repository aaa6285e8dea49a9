from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from conpanion.app.events import MembershipCreated
from conpanion.app.events.handlers.memberships import notify_membership_created
from conpanion.domain.entities import (
    InvitationScope,
    NotificationPriority,
    NotificationType,
    Organization,
    Project,
    User,
)


@pytest.fixture
def membership_uow(mock_uow):
    inviter = User(id=uuid4(), email="olivia@example.com", password_hash="x", first_name="Olivia")
    mock_uow.users = MagicMock()
    mock_uow.users.get_by_id = AsyncMock(return_value=inviter)
    mock_uow.organizations = MagicMock()
    mock_uow.organizations.get_by_id = AsyncMock(
        return_value=Organization(id=uuid4(), name="Acme Build", slug="acme-build")
    )
    mock_uow.projects = MagicMock()
    mock_uow.projects.get_by_id = AsyncMock(
        return_value=Project(id=uuid4(), organization_id=uuid4(), name="Main Site")
    )
    mock_uow.inviter = inviter
    return mock_uow


@pytest.fixture
def engine():
    with patch("conpanion.app.events.handlers.memberships.NotificationEngine") as engine_class:
        engine_class.return_value.create_notification = AsyncMock()
        yield engine_class.return_value


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "scope, expected_type, scope_name",
    [
        (InvitationScope.organization, NotificationType.organization_added, "Acme Build"),
        (InvitationScope.project, NotificationType.project_added, "Main Site"),
    ],
)
async def test_new_member_is_told_who_added_them(
    membership_uow, engine, scope, expected_type, scope_name
):
    # Arrange
    member = uuid4()
    event = MembershipCreated(
        scope=scope,
        scope_id=uuid4(),
        user_id=member,
        role="member",
        added_by=membership_uow.inviter.id,
    )

    # Act
    await notify_membership_created(membership_uow, event)

    # Assert
    kwargs = engine.create_notification.await_args.kwargs
    assert kwargs["user_id"] == member
    assert kwargs["type"] == expected_type
    assert kwargs["priority"] == NotificationPriority.high
    assert kwargs["template_args"] == ["Olivia", scope_name]
    assert kwargs["data"]["role"] == "member"


@pytest.mark.asyncio
async def test_creator_joining_their_own_scope_is_silent(membership_uow, engine):
    me = membership_uow.inviter.id
    event = MembershipCreated(
        scope=InvitationScope.organization,
        scope_id=uuid4(),
        user_id=me,
        role="owner",
        added_by=me,
    )

    await notify_membership_created(membership_uow, event)

    engine.create_notification.assert_not_awaited()
