"""Carrier benchmarking module.

Groups claims by carrier and compares how quickly each carrier's claims
close, how fast supplements get answered, and how often they are approved.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import BaseModel, Field
import polars as pl

from claim_velocity.config import VelocityConfig
from claim_velocity.features import build_claim_frame, build_supplement_frame
from claim_velocity.schema import CAMEL_CASE, ClaimRecord
from claim_velocity.timemath import round_half_up

logger = logging.getLogger(__name__)


class CarrierBenchmark(BaseModel):
    """Closing speed and supplement handling for one carrier."""

    model_config = CAMEL_CASE

    carrier: str
    avg_days_to_close: float = 0.0
    avg_supplement_response_days: float = 0.0
    claim_count: int = Field(default=0, description="Closed claims behind avg_days_to_close")
    approval_rate: int = Field(default=0, ge=0, le=100, description="Approved supplements, %")
    supplement_count: int = 0


def compute_carrier_benchmarks(
    claims: Sequence[ClaimRecord],
    config: VelocityConfig | None = None,
) -> list[CarrierBenchmark]:
    """Compute per-carrier benchmarks.

    Claims without a carrier are grouped under the configured unknown label.
    claim_count is the number of closed claims in the group, not all claims.

    Args:
        claims: Claim collection.
        config: Velocity config (unknown label, approved statuses).

    Returns:
        Benchmarks sorted by claim_count descending; ties keep first-seen order.
    """
    config = config or VelocityConfig()
    claims_df = build_claim_frame(claims, config.unknown_carrier)
    supplements_df = build_supplement_frame(
        claims, config.unknown_carrier, config.approved_supplement_statuses
    )

    if claims_df.height == 0:
        return []

    claim_stats = (
        claims_df.group_by("carrier", maintain_order=True)
        .agg(
            pl.col("close_days").mean().alias("avg_days_to_close"),
            pl.col("close_days").is_not_null().sum().alias("claim_count"),
        )
        .with_row_index("first_seen")
    )
    supplement_stats = supplements_df.group_by("carrier").agg(
        pl.col("response_days").mean().alias("avg_supplement_response_days"),
        pl.len().alias("supplement_count"),
        pl.col("approved").sum().alias("approved_count"),
    )

    merged = (
        claim_stats.join(supplement_stats, on="carrier", how="left")
        .sort("first_seen")
        .sort("claim_count", descending=True, maintain_order=True)
    )
    logger.debug("Benchmarked %d carriers from %d claims", merged.height, claims_df.height)

    benchmarks: list[CarrierBenchmark] = []
    for row in merged.iter_rows(named=True):
        supplement_count = row["supplement_count"] or 0
        approved_count = row["approved_count"] or 0
        approval_rate = (
            int(round_half_up(approved_count / supplement_count * 100))
            if supplement_count > 0
            else 0
        )
        benchmarks.append(
            CarrierBenchmark(
                carrier=row["carrier"],
                avg_days_to_close=round_half_up(row["avg_days_to_close"] or 0.0, 1),
                avg_supplement_response_days=round_half_up(
                    row["avg_supplement_response_days"] or 0.0, 1
                ),
                claim_count=row["claim_count"],
                approval_rate=approval_rate,
                supplement_count=supplement_count,
            )
        )

    return benchmarks
