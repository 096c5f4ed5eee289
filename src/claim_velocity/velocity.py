"""Velocity snapshot composer.

Single entry point that runs every computation over one claim collection
and assembles the aggregate dashboard result. "Now" is captured once and
threaded through all sub-computations so the snapshot is internally
consistent.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field

from claim_velocity.benchmarking import CarrierBenchmark, compute_carrier_benchmarks
from claim_velocity.bottlenecks import Bottleneck, detect_bottlenecks
from claim_velocity.config import VelocityConfig
from claim_velocity.schema import CAMEL_CASE, ClaimRecord
from claim_velocity.timemath import average, days_between, median, resolve_now, round_half_up
from claim_velocity.trends import (
    TrendComparison,
    close_durations,
    compare_partition,
    partition_by_period,
)

logger = logging.getLogger(__name__)


class VelocitySnapshot(BaseModel):
    """Aggregate pipeline velocity for a claim collection."""

    model_config = CAMEL_CASE

    avg_claim_velocity_days: float = 0.0
    median_claim_velocity_days: float = 0.0
    avg_supplement_response_days: float = 0.0
    revenue_per_day: int = 0
    carrier_benchmarks: list[CarrierBenchmark] = Field(default_factory=list)
    bottlenecks: list[Bottleneck] = Field(default_factory=list)
    trend: TrendComparison = Field(default_factory=TrendComparison)

    period_days: int = 90
    generated_at: datetime | None = None
    claims_analyzed: int = 0
    closed_in_period: int = 0

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize with camelCase keys for dashboard consumers."""
        return self.model_dump_json(by_alias=True, indent=indent)


def supplement_response_durations(claims: Iterable[ClaimRecord]) -> list[float]:
    """Submit-to-response days for every answered supplement."""
    return [
        days_between(supplement.submitted_at, supplement.responded_at)
        for claim in claims
        for supplement in claim.supplements
        if supplement.submitted_at is not None and supplement.responded_at is not None
    ]


def calculate_velocity_snapshot(
    claims: Iterable[ClaimRecord],
    period_days: int = 90,
    now: datetime | None = None,
    config: VelocityConfig | None = None,
) -> VelocitySnapshot:
    """Compute the full velocity snapshot.

    Headline velocity (average, median, revenue per day) only counts claims
    closed inside the current window. Supplement response time is averaged
    over every supplement in the collection regardless of window.

    Args:
        claims: Claim collection.
        period_days: Lookback window in days.
        now: Reference timestamp. Defaults to the current time, read once.
        config: Velocity config shared by the sub-computations.

    Returns:
        VelocitySnapshot with rounded headline figures, carrier benchmarks,
        bottlenecks, and the period trend.
    """
    now = resolve_now(now)
    config = config or VelocityConfig()
    claims = list(claims)

    partition = partition_by_period(claims, period_days, now)
    closed_durations = close_durations(partition.current)

    if period_days > 0:
        revenue = sum(claim.total_value for claim in partition.current)
        revenue_per_day = int(round_half_up(revenue / period_days))
    else:
        revenue_per_day = 0

    snapshot = VelocitySnapshot(
        avg_claim_velocity_days=round_half_up(average(closed_durations), 1),
        median_claim_velocity_days=round_half_up(median(closed_durations), 1),
        avg_supplement_response_days=round_half_up(
            average(supplement_response_durations(claims)), 1
        ),
        revenue_per_day=revenue_per_day,
        carrier_benchmarks=compute_carrier_benchmarks(claims, config),
        bottlenecks=detect_bottlenecks(claims, now, config),
        trend=compare_partition(partition, config),
        period_days=period_days,
        generated_at=now,
        claims_analyzed=len(claims),
        closed_in_period=len(partition.current),
    )
    logger.debug(
        "Velocity snapshot: %d claims, %d closed in period, %d carriers, %d stages",
        snapshot.claims_analyzed,
        snapshot.closed_in_period,
        len(snapshot.carrier_benchmarks),
        len(snapshot.bottlenecks),
    )
    return snapshot
