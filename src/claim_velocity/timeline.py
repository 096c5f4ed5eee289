"""Stage timeline builder.

Turns one claim's raw stage entry/exit records into a duration-annotated
timeline. Open stages and open claims are measured against the supplied "now".
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, Field

from claim_velocity.schema import CAMEL_CASE, ClaimRecord, StageEntry
from claim_velocity.timemath import days_between, resolve_now


class StageMetric(BaseModel):
    """Duration of one stage stay within a claim."""

    model_config = CAMEL_CASE

    stage: str
    entered_at: datetime
    exited_at: datetime | None = None
    duration_days: float = Field(description="Days in stage; open stays run to now")


class ClaimTimeline(BaseModel):
    """Per-claim detail view: ordered stage durations plus overall age."""

    model_config = CAMEL_CASE

    claim_id: str
    claim_number: str
    carrier: str | None = None
    stages: list[StageMetric] = Field(default_factory=list)
    total_days: float = Field(description="Intake to close, or intake to now if open")
    status: str


def stage_duration_days(entry: StageEntry, now: datetime) -> float:
    """Days spent in a stage, counting an unexited stage up to now."""
    return days_between(entry.entered_at, entry.exited_at or now)


def build_claim_timeline(claim: ClaimRecord, now: datetime | None = None) -> ClaimTimeline:
    """Build the stage timeline for a single claim.

    Stages keep their input order; callers supply them in entry order.

    Args:
        claim: The claim record.
        now: Reference timestamp for open stages and open claims.
            Defaults to the current time.

    Returns:
        ClaimTimeline with one StageMetric per stage entry.
    """
    now = resolve_now(now)
    stages = [
        StageMetric(
            stage=entry.stage,
            entered_at=entry.entered_at,
            exited_at=entry.exited_at,
            duration_days=stage_duration_days(entry, now),
        )
        for entry in claim.stages
    ]
    return ClaimTimeline(
        claim_id=claim.id,
        claim_number=claim.claim_number,
        carrier=claim.carrier,
        stages=stages,
        total_days=days_between(claim.created_at, claim.closed_at or now),
        status=claim.status,
    )


def build_claim_timelines(
    claims: Iterable[ClaimRecord], now: datetime | None = None
) -> list[ClaimTimeline]:
    """Build timelines for many claims against one shared "now"."""
    now = resolve_now(now)
    return [build_claim_timeline(claim, now) for claim in claims]
