from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from conpanion.app.use_cases.invitations import InviteUseCase
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    Invitation,
    InvitationScope,
    InvitationStatus,
    MembershipStatus,
    Organization,
    OrganizationMembership,
    OrganizationRole,
    User,
)
from conpanion.domain.entities.invitation import INVITATION_TTL


def _returns_argument(value):
    return value


@pytest.fixture
def organization():
    return Organization(id=uuid4(), name="Acme Build", slug="acme-build")


@pytest.fixture
def inviter_id():
    return uuid4()


@pytest.fixture
def invite_uow(mock_uow, organization, inviter_id):
    mock_uow.organizations = MagicMock()
    mock_uow.organizations.get_by_id = AsyncMock(return_value=organization)

    owner = OrganizationMembership(
        organization_id=organization.id,
        user_id=inviter_id,
        role=OrganizationRole.owner,
        status=MembershipStatus.active,
    )
    mock_uow.organization_members = MagicMock()
    mock_uow.organization_members.get = AsyncMock(return_value=owner)

    mock_uow.users = MagicMock()
    mock_uow.users.get_by_email = AsyncMock(return_value=None)

    mock_uow.invitations = MagicMock()
    mock_uow.invitations.get_pending_for_email = AsyncMock(return_value=None)
    mock_uow.invitations.create = AsyncMock(side_effect=_returns_argument)
    mock_uow.invitations.update = AsyncMock(side_effect=_returns_argument)
    return mock_uow


@pytest.mark.asyncio
async def test_invites_new_email(invite_uow, organization, inviter_id):
    # Act
    result = await InviteUseCase(invite_uow).execute(
        InvitationScope.organization, organization.id, " New@Example.com ", "member", inviter_id
    )

    # Assert
    assert result.is_ok()
    response = result.value
    assert response.email == "new@example.com"
    assert response.status == "pending"
    assert response.user_exists is False
    assert response.is_resend is False
    assert "/invitation/" in response.invitation_url

    invitation = invite_uow.invitations.create.call_args.args[0]
    assert invitation.expires_at - invitation.invited_at == INVITATION_TTL
    assert invitation.organization_id == organization.id
    assert invitation.project_id is None
    invite_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_rejects_invalid_email_and_role(invite_uow, organization, inviter_id):
    use_case = InviteUseCase(invite_uow)

    bad_email = await use_case.execute(
        InvitationScope.organization, organization.id, "not-an-email", "member", inviter_id
    )
    bad_role = await use_case.execute(
        InvitationScope.project, organization.id, "a@example.com", "guest", inviter_id
    )

    assert bad_email.error.code == "INVALID_EMAIL"
    assert bad_role.error.code == "INVALID_ROLE"
    invite_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_member_role_cannot_invite(invite_uow, organization, inviter_id):
    invite_uow.organization_members.get = AsyncMock(
        return_value=OrganizationMembership(
            organization_id=organization.id,
            user_id=inviter_id,
            role=OrganizationRole.member,
            status=MembershipStatus.active,
        )
    )

    result = await InviteUseCase(invite_uow).execute(
        InvitationScope.organization, organization.id, "a@example.com", "member", inviter_id
    )

    assert result.error.code == "PERMISSION_DENIED"


@pytest.mark.asyncio
async def test_active_member_is_rejected(invite_uow, organization, inviter_id):
    # Arrange
    invitee = User(id=uuid4(), email="a@example.com", password_hash="x")
    invite_uow.users.get_by_email = AsyncMock(return_value=invitee)
    inviter_membership = await invite_uow.organization_members.get(organization.id, inviter_id)
    invite_uow.organization_members.get = AsyncMock(
        side_effect=[
            inviter_membership,
            OrganizationMembership(
                organization_id=organization.id,
                user_id=invitee.id,
                status=MembershipStatus.active,
            ),
        ]
    )

    # Act
    result = await InviteUseCase(invite_uow).execute(
        InvitationScope.organization, organization.id, "a@example.com", "member", inviter_id
    )

    # Assert
    assert result.error.code == "ALREADY_MEMBER"


@pytest.mark.asyncio
async def test_deactivated_member_can_be_invited_again(invite_uow, organization, inviter_id):
    invitee = User(id=uuid4(), email="a@example.com", password_hash="x")
    invite_uow.users.get_by_email = AsyncMock(return_value=invitee)
    inviter_membership = await invite_uow.organization_members.get(organization.id, inviter_id)
    invite_uow.organization_members.get = AsyncMock(
        side_effect=[
            inviter_membership,
            OrganizationMembership(
                organization_id=organization.id,
                user_id=invitee.id,
                status=MembershipStatus.deactivated,
            ),
        ]
    )

    result = await InviteUseCase(invite_uow).execute(
        InvitationScope.organization, organization.id, "a@example.com", "admin", inviter_id
    )

    assert result.is_ok()
    assert result.value.was_previously_member is True
    assert result.value.user_exists is True
    assert invite_uow.invitations.create.call_args.args[0].user_id == invitee.id


@pytest.mark.asyncio
async def test_pending_invitation_is_resent_instead_of_duplicated(
    invite_uow, organization, inviter_id
):
    # Arrange
    now = utcnow()
    pending = Invitation(
        scope=InvitationScope.organization,
        scope_id=organization.id,
        organization_id=organization.id,
        email="a@example.com",
        role="member",
        invited_at=now - timedelta(days=1),
        expires_at=now + timedelta(days=6),
    )
    old_token = pending.token
    invite_uow.invitations.get_pending_for_email = AsyncMock(return_value=pending)

    # Act
    result = await InviteUseCase(invite_uow).execute(
        InvitationScope.organization, organization.id, "a@example.com", "admin", inviter_id
    )

    # Assert
    assert result.is_ok()
    assert result.value.is_resend is True
    assert result.value.role == "admin"
    assert pending.token != old_token
    invite_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_stale_pending_invitation_is_expired_and_replaced(
    invite_uow, organization, inviter_id
):
    now = utcnow()
    stale = Invitation(
        scope=InvitationScope.organization,
        scope_id=organization.id,
        organization_id=organization.id,
        email="a@example.com",
        role="member",
        invited_at=now - timedelta(days=9),
        expires_at=now - timedelta(days=2),
    )
    invite_uow.invitations.get_pending_for_email = AsyncMock(return_value=stale)

    result = await InviteUseCase(invite_uow).execute(
        InvitationScope.organization, organization.id, "a@example.com", "member", inviter_id
    )

    assert result.is_ok()
    assert result.value.is_resend is False
    assert stale.status == InvitationStatus.expired
    invite_uow.invitations.create.assert_awaited_once()


@pytest.mark.asyncio
async def test_unexpected_failure_rolls_back(invite_uow, organization, inviter_id):
    invite_uow.invitations.create = AsyncMock(side_effect=RuntimeError("db down"))

    result = await InviteUseCase(invite_uow).execute(
        InvitationScope.organization, organization.id, "a@example.com", "member", inviter_id
    )

    assert result.error.code == "PROCESSING_ERROR"
    assert result.error.details == {"error": "db down"}
    invite_uow.rollback.assert_awaited_once()
