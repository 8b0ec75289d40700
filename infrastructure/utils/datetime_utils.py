from datetime import datetime, timezone


def utc_now() -> datetime:
    """Returns the current datetime object, timezone-aware (UTC)."""
    return datetime.now(timezone.utc)

def make_aware(dt: datetime, tz: timezone = timezone.utc) -> datetime:
    """Makes a naive datetime object timezone-aware (defaults to UTC)."""
    if dt.tzinfo is not None and dt.tzinfo.utcoffset(dt) is not None:
        return dt
    # SQLite hands back naive values for DateTime(timezone=True) columns
    return dt.replace(tzinfo=tz)

def to_timestamp_ms(dt: datetime) -> int:
    """Converts a datetime object to a UTC timestamp in milliseconds (integer)."""
    if dt.tzinfo is None:
        dt = make_aware(dt, timezone.utc)
    elif dt.tzinfo != timezone.utc:
        dt = dt.astimezone(timezone.utc)
    return int(dt.timestamp() * 1000)
