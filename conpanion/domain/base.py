from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current time as naive UTC, matching how timestamps are stored."""
    return datetime.now(UTC).replace(tzinfo=None)
