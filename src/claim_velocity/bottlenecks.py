"""Stage bottleneck detection.

Aggregates stage durations across every claim and ranks stages by the
average time a claim spends in them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, Field
import polars as pl

from claim_velocity.config import VelocityConfig, get_stage_suggestion
from claim_velocity.features import build_stage_frame
from claim_velocity.schema import CAMEL_CASE, ClaimRecord
from claim_velocity.timemath import resolve_now, round_half_up

logger = logging.getLogger(__name__)


class Bottleneck(BaseModel):
    """Average time consumed by one stage across all claims."""

    model_config = CAMEL_CASE

    stage: str
    avg_days: float
    percent_of_total: int = Field(
        description="Share of the summed per-stage averages, in percent"
    )
    suggestion: str
    occurrences: int = Field(default=0, description="Stage stays aggregated")


def detect_bottlenecks(
    claims: Sequence[ClaimRecord],
    now: datetime | None = None,
    config: VelocityConfig | None = None,
) -> list[Bottleneck]:
    """Rank stages by average duration.

    percent_of_total is each stage's average over the sum of all stage
    averages, so it describes the typical pipeline, not any single claim.

    Args:
        claims: Claim collection.
        now: Reference timestamp for stages that have not been exited.
        config: Velocity config (suggestion table and fallback).

    Returns:
        Bottlenecks sorted by avg_days descending.
    """
    now = resolve_now(now)
    config = config or VelocityConfig()
    stages_df = build_stage_frame(claims, now)

    if stages_df.height == 0:
        return []

    stats = (
        stages_df.group_by("stage", maintain_order=True)
        .agg(
            pl.col("duration_days").mean().alias("avg_days"),
            pl.len().alias("occurrences"),
        )
        .sort("avg_days", descending=True, maintain_order=True)
    )
    total_avg_days = float(stats["avg_days"].sum())
    logger.debug(
        "Aggregated %d stage stays into %d stages", stages_df.height, stats.height
    )

    bottlenecks: list[Bottleneck] = []
    for row in stats.iter_rows(named=True):
        if total_avg_days == 0:
            percent = 0
        else:
            percent = int(round_half_up(row["avg_days"] / total_avg_days * 100))
        bottlenecks.append(
            Bottleneck(
                stage=row["stage"],
                avg_days=round_half_up(row["avg_days"], 1),
                percent_of_total=percent,
                suggestion=get_stage_suggestion(
                    row["stage"], config.stage_suggestions, config.fallback_suggestion
                ),
                occurrences=row["occurrences"],
            )
        )

    return bottlenecks
