"""Day-granularity time math and small statistics helpers.

Every other module builds on these. None of them raise on empty input.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime, timezone

from claim_velocity.schema import ensure_utc

SECONDS_PER_DAY = 86_400


def resolve_now(now: datetime | None = None) -> datetime:
    """Return the reference timestamp for one computation, in UTC.

    Callers capture this once and pass it down so that every duration in a
    result is measured against the same instant.
    """
    if now is None:
        return datetime.now(tz=timezone.utc)
    return ensure_utc(now)  # type: ignore[return-value]


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end. Negative if end precedes start."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def average(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def median(values: Iterable[float]) -> float:
    """Median of a sorted copy, 0.0 for an empty sequence."""
    items = sorted(values)
    n = len(items)
    if n == 0:
        return 0.0
    mid = n // 2
    if n % 2 == 0:
        return (items[mid - 1] + items[mid]) / 2
    return float(items[mid])


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going toward positive infinity (2.5 -> 3, -2.5 -> -2)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
