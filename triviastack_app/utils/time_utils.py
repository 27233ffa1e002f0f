"""UTC helpers. Timestamps are stored in UTC; SQLite hands them back naive."""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware now, used for every graded_at / resolved_at stamp."""
    return datetime.now(timezone.utc)


def ensure_utc(dt):
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
