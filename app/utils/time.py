from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching how session times are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utctoday() -> date:
    return utcnow().date()
