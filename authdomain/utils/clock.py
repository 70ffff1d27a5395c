"""UTC helpers shared by entities, rules and events."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Returns ``moment`` as an aware UTC datetime.

    Naive datetimes are taken to be UTC already, so callers may mix naive and
    aware values in one comparison.
    """
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
