from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime. Default clock for stores and tasks."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize to aware UTC; naive values are taken to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
