from datetime import datetime, time
from uuid import uuid4

from conpanion.domain.entities import NotificationSettings


def _settings(start, end, timezone="UTC", enabled=True):
    return NotificationSettings(
        user_id=uuid4(),
        quiet_hours_enabled=enabled,
        quiet_hours_start=start,
        quiet_hours_end=end,
        timezone=timezone,
    )


def test_disabled_quiet_hours_never_match():
    settings = _settings(time(0, 0), time(23, 59), enabled=False)
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 12, 0)) is False


def test_missing_window_never_matches():
    settings = _settings(None, None)
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 12, 0)) is False


def test_same_day_window():
    settings = _settings(time(9, 0), time(17, 0))
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 12, 0)) is True
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 18, 0)) is False


def test_window_wrapping_midnight():
    settings = _settings(time(22, 0), time(7, 0))
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 23, 30)) is True
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 3, 0)) is True
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 12, 0)) is False


def test_window_is_evaluated_in_user_timezone():
    # 03:00 UTC in January is 22:00 the previous evening in New York
    settings = _settings(time(22, 0), time(7, 0), timezone="America/New_York")
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 3, 0)) is True
    # 15:00 UTC is 10:00 in New York
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 15, 0)) is False


def test_unknown_timezone_falls_back_to_utc():
    settings = _settings(time(9, 0), time(17, 0), timezone="Mars/Olympus_Mons")
    assert settings.in_quiet_hours(datetime(2026, 1, 10, 12, 0)) is True
