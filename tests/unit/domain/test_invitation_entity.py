from datetime import datetime, timedelta
from uuid import uuid4

from conpanion.domain.entities import Invitation, InvitationScope, InvitationStatus
from conpanion.domain.entities.invitation import INVITATION_TTL, TOKEN_PATTERN

NOW = datetime(2026, 3, 1, 12, 0)


def _invitation(**overrides):
    values = dict(
        scope=InvitationScope.organization,
        scope_id=uuid4(),
        organization_id=uuid4(),
        email="invitee@example.com",
        role="member",
        invited_at=NOW,
        expires_at=NOW + INVITATION_TTL,
    )
    values.update(overrides)
    return Invitation(**values)


def test_token_is_128_bit_hex():
    assert TOKEN_PATTERN.match(_invitation().token)


def test_acceptable_only_while_pending_and_unexpired():
    invitation = _invitation()
    assert invitation.is_acceptable(NOW) is True
    assert invitation.is_acceptable(NOW + INVITATION_TTL) is False

    invitation.status = InvitationStatus.declined
    assert invitation.is_acceptable(NOW) is False


def test_resend_issues_new_token_and_expiry():
    invitation = _invitation()
    old_token = invitation.token

    invitation.apply_resend(NOW + timedelta(days=2))

    assert invitation.token != old_token
    assert invitation.expires_at == NOW + timedelta(days=2) + INVITATION_TTL
    assert invitation.resend_count == 1


def test_fourth_resend_within_a_day_is_rate_limited():
    invitation = _invitation()
    for minutes in (1, 2, 3):
        invitation.apply_resend(NOW + timedelta(minutes=minutes))

    assert invitation.resend_count == 3
    assert invitation.is_resend_rate_limited(NOW + timedelta(minutes=4)) is True


def test_resend_counter_restarts_after_window():
    invitation = _invitation()
    for minutes in (1, 2, 3):
        invitation.apply_resend(NOW + timedelta(minutes=minutes))

    later = NOW + timedelta(hours=25)
    assert invitation.is_resend_rate_limited(later) is False
    invitation.apply_resend(later)
    assert invitation.resend_count == 1
