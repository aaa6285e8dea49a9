from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from conpanion.app.use_cases.invitations import ResendInvitationUseCase
from conpanion.domain.base import utcnow
from conpanion.domain.entities import (
    Invitation,
    InvitationScope,
    InvitationStatus,
    MembershipStatus,
    OrganizationMembership,
    OrganizationRole,
)
from conpanion.domain.entities.invitation import INVITATION_TTL


@pytest.fixture
def admin_id():
    return uuid4()


@pytest.fixture
def invitation():
    now = utcnow()
    organization_id = uuid4()
    return Invitation(
        scope=InvitationScope.organization,
        scope_id=organization_id,
        organization_id=organization_id,
        email="invitee@example.com",
        role="member",
        invited_at=now,
        expires_at=now + INVITATION_TTL,
    )


@pytest.fixture
def resend_uow(mock_uow, invitation, admin_id):
    mock_uow.invitations = MagicMock()
    mock_uow.invitations.get_by_id = AsyncMock(return_value=invitation)
    mock_uow.invitations.update = AsyncMock()
    mock_uow.organization_members = MagicMock()
    mock_uow.organization_members.get = AsyncMock(
        return_value=OrganizationMembership(
            organization_id=invitation.scope_id,
            user_id=admin_id,
            role=OrganizationRole.admin,
            status=MembershipStatus.active,
        )
    )
    return mock_uow


@pytest.mark.asyncio
async def test_resend_rotates_token_and_extends_expiry(resend_uow, invitation, admin_id):
    # Arrange
    old_token = invitation.token
    old_expiry = invitation.expires_at

    # Act
    result = await ResendInvitationUseCase(resend_uow).execute(invitation.id, admin_id)

    # Assert
    assert result.is_ok()
    assert result.value.is_resend is True
    assert result.value.resend_count == 1
    assert invitation.token != old_token
    assert invitation.expires_at >= old_expiry
    resend_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_fourth_resend_in_a_day_is_rate_limited(resend_uow, invitation, admin_id):
    use_case = ResendInvitationUseCase(resend_uow)
    for _ in range(3):
        assert (await use_case.execute(invitation.id, admin_id)).is_ok()

    result = await use_case.execute(invitation.id, admin_id)

    assert result.error.code == "RATE_LIMIT_EXCEEDED"
    assert result.error.details == {"resend_count": 3}


@pytest.mark.asyncio
async def test_only_pending_invitations_are_resent(resend_uow, invitation, admin_id):
    invitation.status = InvitationStatus.accepted

    result = await ResendInvitationUseCase(resend_uow).execute(invitation.id, admin_id)

    assert result.error.code == "INVITATION_NOT_PENDING"


@pytest.mark.asyncio
async def test_non_admin_cannot_resend(resend_uow, invitation):
    resend_uow.organization_members.get = AsyncMock(return_value=None)

    result = await ResendInvitationUseCase(resend_uow).execute(invitation.id, uuid4())

    assert result.error.code == "PERMISSION_DENIED"
    resend_uow.invitations.update.assert_not_called()


@pytest.mark.asyncio
async def test_expired_window_resets_counter(resend_uow, invitation, admin_id):
    invitation.resend_count = 3
    invitation.last_resend_at = utcnow() - timedelta(hours=30)

    result = await ResendInvitationUseCase(resend_uow).execute(invitation.id, admin_id)

    assert result.is_ok()
    assert result.value.resend_count == 1
