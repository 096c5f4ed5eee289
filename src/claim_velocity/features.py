"""Feature flattening module.

Converts a collection of claim records into flat Polars frames that the
grouping computations aggregate over:
- claims: one row per claim (carrier bucket, close duration)
- supplements: one row per supplement (carrier bucket, response duration, approval)
- stages: one row per stage stay (stage name, duration against now)

Rows are emitted in input order so that order-preserving group-bys report
groups in first-seen order.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import polars as pl

from claim_velocity.schema import APPROVED_SUPPLEMENT_STATUSES, UNKNOWN_CARRIER, ClaimRecord
from claim_velocity.timeline import stage_duration_days
from claim_velocity.timemath import days_between

CLAIM_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "claim_id": pl.Utf8(),
    "carrier": pl.Utf8(),
    "close_days": pl.Float64(),
}

SUPPLEMENT_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "claim_id": pl.Utf8(),
    "carrier": pl.Utf8(),
    "response_days": pl.Float64(),
    "approved": pl.Boolean(),
}

STAGE_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "claim_id": pl.Utf8(),
    "stage": pl.Utf8(),
    "duration_days": pl.Float64(),
}


def carrier_bucket(claim: ClaimRecord, unknown_carrier: str = UNKNOWN_CARRIER) -> str:
    """Group label for a claim's carrier; missing carriers share one bucket."""
    return claim.carrier if claim.carrier is not None else unknown_carrier


def build_claim_frame(
    claims: Iterable[ClaimRecord],
    unknown_carrier: str = UNKNOWN_CARRIER,
) -> pl.DataFrame:
    """One row per claim. close_days is null for open claims."""
    rows = [
        {
            "claim_id": claim.id,
            "carrier": carrier_bucket(claim, unknown_carrier),
            "close_days": (
                days_between(claim.created_at, claim.closed_at)
                if claim.closed_at is not None
                else None
            ),
        }
        for claim in claims
    ]
    return pl.DataFrame(rows, schema=CLAIM_FRAME_SCHEMA)


def build_supplement_frame(
    claims: Iterable[ClaimRecord],
    unknown_carrier: str = UNKNOWN_CARRIER,
    approved_statuses: Iterable[str] = APPROVED_SUPPLEMENT_STATUSES,
) -> pl.DataFrame:
    """One row per supplement.

    response_days is null unless both submitted_at and responded_at are set.
    """
    approved = set(approved_statuses)
    rows = []
    for claim in claims:
        bucket = carrier_bucket(claim, unknown_carrier)
        for supplement in claim.supplements:
            if supplement.submitted_at is not None and supplement.responded_at is not None:
                response_days = days_between(supplement.submitted_at, supplement.responded_at)
            else:
                response_days = None
            rows.append(
                {
                    "claim_id": claim.id,
                    "carrier": bucket,
                    "response_days": response_days,
                    "approved": supplement.status in approved,
                }
            )
    return pl.DataFrame(rows, schema=SUPPLEMENT_FRAME_SCHEMA)


def build_stage_frame(claims: Iterable[ClaimRecord], now: datetime) -> pl.DataFrame:
    """One row per stage stay, open stays measured against now."""
    rows = [
        {
            "claim_id": claim.id,
            "stage": entry.stage,
            "duration_days": stage_duration_days(entry, now),
        }
        for claim in claims
        for entry in claim.stages
    ]
    return pl.DataFrame(rows, schema=STAGE_FRAME_SCHEMA)
