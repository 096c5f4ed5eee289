"""Period-over-period velocity trend.

Compares the average intake-to-close time of claims closed in the current
window with those closed in the window of equal length just before it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Literal

from pydantic import BaseModel, Field

from claim_velocity.config import VelocityConfig
from claim_velocity.schema import CAMEL_CASE, ClaimRecord
from claim_velocity.timemath import average, days_between, resolve_now, round_half_up

logger = logging.getLogger(__name__)

TrendDirection = Literal["faster", "slower", "stable"]


class PeriodPartition(BaseModel):
    """Closed claims split into the current and the preceding window."""

    period_start: datetime
    previous_period_start: datetime
    current: list[ClaimRecord] = Field(default_factory=list)
    previous: list[ClaimRecord] = Field(default_factory=list)


class TrendComparison(BaseModel):
    """Current vs. previous window close times."""

    model_config = CAMEL_CASE

    current_period_avg_days: float = 0.0
    previous_period_avg_days: float = 0.0
    change_percent: float = Field(default=0.0, description="Signed, one decimal")
    direction: TrendDirection = "stable"
    current_period_claims: int = 0
    previous_period_claims: int = 0


def _window_start(now: datetime, days: int) -> datetime:
    """now - days, clamped to the representable datetime range."""
    try:
        return now - timedelta(days=days)
    except OverflowError:
        bound = datetime.min if days > 0 else datetime.max
        return bound.replace(tzinfo=timezone.utc)


def partition_by_period(
    claims: Iterable[ClaimRecord],
    period_days: int = 90,
    now: datetime | None = None,
) -> PeriodPartition:
    """Split closed claims into the current and previous window.

    Current: closed at most period_days before now (or after now).
    Previous: closed more than period_days and at most 2 * period_days before now.
    Open claims and older closures belong to neither. Membership is decided
    by closure age, so windows reaching past the calendar range still work.
    """
    now = resolve_now(now)
    period_start = _window_start(now, period_days)
    previous_period_start = _window_start(now, 2 * period_days)

    current: list[ClaimRecord] = []
    previous: list[ClaimRecord] = []
    for claim in claims:
        if claim.closed_at is None:
            continue
        age = days_between(claim.closed_at, now)
        if age <= period_days:
            current.append(claim)
        elif age <= 2 * period_days:
            previous.append(claim)

    logger.debug(
        "Period partition: %d current, %d previous (period_days=%d)",
        len(current),
        len(previous),
        period_days,
    )
    return PeriodPartition(
        period_start=period_start,
        previous_period_start=previous_period_start,
        current=current,
        previous=previous,
    )


def close_durations(claims: Iterable[ClaimRecord]) -> list[float]:
    """Intake-to-close days for each closed claim."""
    return [
        days_between(claim.created_at, claim.closed_at)
        for claim in claims
        if claim.closed_at is not None
    ]


def classify_direction(change_percent: float, threshold_pct: float = 5.0) -> TrendDirection:
    """Fewer days is faster; moves smaller than the threshold are stable."""
    if abs(change_percent) < threshold_pct:
        return "stable"
    if change_percent < 0:
        return "faster"
    return "slower"


def compare_partition(
    partition: PeriodPartition,
    config: VelocityConfig | None = None,
) -> TrendComparison:
    """Build the trend comparison from an existing period partition."""
    config = config or VelocityConfig()
    current_avg = average(close_durations(partition.current))
    previous_avg = average(close_durations(partition.previous))

    if previous_avg > 0:
        change_percent = round_half_up((current_avg - previous_avg) / previous_avg * 100, 1)
    else:
        change_percent = 0.0

    return TrendComparison(
        current_period_avg_days=current_avg,
        previous_period_avg_days=previous_avg,
        change_percent=change_percent,
        direction=classify_direction(change_percent, config.stable_threshold_pct),
        current_period_claims=len(partition.current),
        previous_period_claims=len(partition.previous),
    )


def compare_trend(
    claims: Iterable[ClaimRecord],
    period_days: int = 90,
    now: datetime | None = None,
    config: VelocityConfig | None = None,
) -> TrendComparison:
    """Compare close velocity between the current and previous window.

    Args:
        claims: Claim collection.
        period_days: Window length in days.
        now: End of the current window. Defaults to the current time.
        config: Velocity config (stable threshold).

    Returns:
        TrendComparison; change_percent is 0 when the previous window has
        no closed claims.
    """
    partition = partition_by_period(claims, period_days, now)
    return compare_partition(partition, config)
