from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from conpanion.app.events import MembershipCreated
from conpanion.app.use_cases.invitations import AcceptInvitationUseCase
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    Invitation,
    InvitationScope,
    InvitationStatus,
    MembershipStatus,
    OrganizationMembership,
    Project,
    User,
)
from conpanion.domain.entities.invitation import INVITATION_TTL


@pytest.fixture
def user():
    return User(id=uuid4(), email="invitee@example.com", password_hash="x")


@pytest.fixture
def invitation():
    now = utcnow()
    organization_id = uuid4()
    return Invitation(
        scope=InvitationScope.organization,
        scope_id=organization_id,
        organization_id=organization_id,
        email="invitee@example.com",
        role="admin",
        invited_by=uuid4(),
        invited_at=now,
        expires_at=now + INVITATION_TTL,
    )


@pytest.fixture
def events():
    bus = MagicMock()
    bus.publish = AsyncMock()
    return bus


@pytest.fixture
def accept_uow(mock_uow, user, invitation):
    mock_uow.users = MagicMock()
    mock_uow.users.get_by_id = AsyncMock(return_value=user)
    mock_uow.invitations = MagicMock()
    mock_uow.invitations.get_by_token = AsyncMock(return_value=invitation)
    mock_uow.invitations.update = AsyncMock()
    mock_uow.organization_members = MagicMock()
    mock_uow.organization_members.get = AsyncMock(return_value=None)
    mock_uow.organization_members.upsert_active = AsyncMock()
    mock_uow.project_members = MagicMock()
    mock_uow.project_members.get = AsyncMock(return_value=None)
    mock_uow.project_members.upsert_active = AsyncMock()
    mock_uow.projects = MagicMock()
    mock_uow.projects.get_default_for_organization = AsyncMock(return_value=None)
    return mock_uow


@pytest.mark.asyncio
async def test_anonymous_user_must_sign_in(accept_uow, invitation, events):
    result = await AcceptInvitationUseCase(accept_uow, events).execute(invitation.token, None)

    assert result.error.code == "AUTH_REQUIRED"
    accept_uow.invitations.get_by_token.assert_not_called()


@pytest.mark.asyncio
async def test_accept_creates_membership_and_emits_event(
    accept_uow, user, invitation, events
):
    # Act
    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    # Assert
    assert result.is_ok()
    assert result.value.role == "admin"
    assert result.value.was_reactivated is False
    assert invitation.status == InvitationStatus.accepted
    assert invitation.user_id == user.id
    accept_uow.organization_members.upsert_active.assert_awaited_once()

    event = events.publish.call_args.args[1]
    assert isinstance(event, MembershipCreated)
    assert event.user_id == user.id
    assert event.added_by == invitation.invited_by
    accept_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_deactivated_member_is_reactivated(accept_uow, user, invitation, events):
    accept_uow.organization_members.get = AsyncMock(
        side_effect=[
            None,
            OrganizationMembership(
                organization_id=invitation.scope_id,
                user_id=user.id,
                status=MembershipStatus.deactivated,
            ),
        ]
    )

    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    assert result.is_ok()
    assert result.value.was_reactivated is True


@pytest.mark.asyncio
async def test_org_admin_joins_default_project_as_admin(accept_uow, user, invitation, events):
    project = Project(id=uuid4(), organization_id=invitation.scope_id, name="General")
    accept_uow.projects.get_default_for_organization = AsyncMock(return_value=project)

    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    assert result.value.default_project_id == str(project.id)
    args = accept_uow.project_members.upsert_active.call_args.args
    assert args[0] == project.id and args[2] == "admin"


@pytest.mark.asyncio
async def test_bound_invitation_rejects_other_user(accept_uow, user, invitation, events):
    invitation.user_id = uuid4()

    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    assert result.error.code == "WRONG_USER"


@pytest.mark.asyncio
async def test_unbound_invitation_requires_matching_email(accept_uow, user, invitation, events):
    user.email = "someone-else@example.com"

    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    assert result.error.code == "WRONG_EMAIL"


@pytest.mark.asyncio
async def test_active_member_closes_pending_invitation(accept_uow, user, invitation, events):
    # Arrange
    accept_uow.organization_members.get = AsyncMock(
        return_value=OrganizationMembership(
            organization_id=invitation.scope_id,
            user_id=user.id,
            status=MembershipStatus.active,
        )
    )

    # Act
    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    # Assert
    assert result.error.code == "ALREADY_MEMBER"
    assert invitation.status == InvitationStatus.accepted
    events.publish.assert_not_called()


@pytest.mark.asyncio
async def test_expired_invitation_is_invalid(accept_uow, user, invitation, events):
    invitation.expires_at = utcnow() - timedelta(minutes=1)

    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    assert result.error.code == "INVALID_INVITATION"
    accept_uow.organization_members.upsert_active.assert_not_called()


@pytest.mark.asyncio
async def test_concurrent_membership_insert_is_a_conflict(
    accept_uow, user, invitation, events
):
    accept_uow.organization_members.upsert_active = AsyncMock(
        side_effect=IntegrityError("INSERT", {}, Exception("unique"))
    )

    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    assert result.error.code == "MEMBERSHIP_CONFLICT"
    accept_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_active_member_leaves_expired_invitation_for_the_sweep(
    accept_uow, user, invitation, events
):
    """
    Given the user is already an active member
    And their pending invitation is past its expiry
    When they try to accept it
    Then the invitation stays pending and is not written
    """
    # Arrange
    invitation.expires_at = utcnow() - timedelta(minutes=1)
    accept_uow.organization_members.get = AsyncMock(
        return_value=OrganizationMembership(
            organization_id=invitation.scope_id,
            user_id=user.id,
            status=MembershipStatus.active,
        )
    )

    # Act
    result = await AcceptInvitationUseCase(accept_uow, events).execute(
        invitation.token, user.id
    )

    # Assert
    assert result.error.code == "ALREADY_MEMBER"
    assert invitation.status == InvitationStatus.pending
    assert invitation.accepted_at is None
    accept_uow.invitations.update.assert_not_awaited()
    accept_uow.commit.assert_not_awaited()
