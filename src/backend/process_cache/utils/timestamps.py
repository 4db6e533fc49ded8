from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time as a timezone-naive datetime, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
