"""Record Timestamps — UTC, millisecond precision, strictly increasing per record.

Invariants:
    - Every timestamp is UTC-aware and truncated to whole milliseconds (BSON datetime resolution)
    - next_timestamp(previous, now) > previous whenever previous is given
"""

from datetime import datetime, timedelta, timezone

_ONE_MS = timedelta(milliseconds=1)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes from the store are UTC by convention."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_store_precision(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def next_timestamp(previous: datetime | None, now: datetime) -> datetime:
    """Timestamp for a mutation happening at `now` on a record last touched at `previous`."""
    current = to_store_precision(as_utc(now))
    if previous is None:
        return current
    return max(current, to_store_precision(as_utc(previous)) + _ONE_MS)
