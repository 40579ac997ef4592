"""Date and clock utilities for tempstore.

Dates are stored as millisecond-precision ISO-8601 strings in UTC with a
"Z" suffix, e.g. ``2024-01-01T00:00:00.000Z``. Expiration deadlines are
absolute epoch milliseconds.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


class InvalidDate:
    """Sentinel for a date entry whose stored string could not be parsed.

    Decoding never raises on a malformed date; callers get this sentinel
    back instead and can test for it with ``value is INVALID_DATE``.
    """

    _instance: InvalidDate | None = None

    def __new__(cls) -> InvalidDate:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Invalid Date"

    def __bool__(self) -> bool:
        return False


INVALID_DATE = InvalidDate()


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_iso_millis(date: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with millisecond precision.

    Naive datetimes are taken to already be in UTC. Microseconds below the
    millisecond are truncated.

    Args:
        date: The datetime to format.

    Returns:
        String like '2024-01-01T00:00:00.000Z'.
    """
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    else:
        date = date.astimezone(timezone.utc)
    return date.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: object) -> datetime | InvalidDate:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Accepts a trailing 'Z' and date-only strings (taken as UTC midnight).

    Args:
        value: The stored date string.

    Returns:
        The parsed datetime, or INVALID_DATE if the value is not a valid
        ISO-8601 string.
    """
    if not isinstance(value, str):
        return INVALID_DATE

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return INVALID_DATE

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
