"""
Temporal rules.

Pure functions over a caller-supplied reference instant. Nothing here reads
the wall clock; callers capture ``now`` once per run and pass it down.
"""

from datetime import datetime, timedelta

from followups.core.entities.common import as_utc


def days_between(start: datetime, end: datetime) -> int:
    """
    Whole days from ``start`` to ``end``, floored.

    Negative when ``end`` precedes ``start``: 5 hours before is -1.
    """
    # timedelta.days is already floored for negative deltas
    return (as_utc(end) - as_utc(start)).days


def is_within_trailing_window(
    timestamp: datetime, now: datetime, window_days: int
) -> bool:
    """True if ``timestamp`` falls after ``now - window_days``."""
    return as_utc(timestamp) > as_utc(now) - timedelta(days=window_days)


def days_from(now: datetime, days: int) -> datetime:
    return as_utc(now) + timedelta(days=days)
