from datetime import datetime, timezone


def utc_now() -> datetime:
    """Naive UTC timestamp, matching how expires_at is stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    return (now or utc_now()) >= expires_at
