"""Synthetic claim pipeline generator.

Produces claim records with realistic pipeline patterns:
- Lognormal stage durations with per-carrier speed factors
- A share of claims still open, parked in an unfinished stage
- Claims recorded without a carrier
- Supplements, some of them still waiting for a carrier response

All generation is seeded and anchored to config.as_of, never the wall clock,
for deterministic, reproducible output.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np

from claim_velocity.config import PipelineConfig
from claim_velocity.schema import (
    CLAIM_STAGES,
    SUPPLEMENT_STATUSES,
    ClaimRecord,
    StageEntry,
    SupplementRecord,
)

# Median days a claim spends in each stage
STAGE_MEDIAN_DAYS: dict[str, float] = {
    "INTAKE": 1.0,
    "INSPECTION": 5.0,
    "ESTIMATE": 3.0,
    "SUBMITTED": 7.0,
    "NEGOTIATION": 10.0,
    "APPROVED": 2.0,
    "SUPPLEMENT": 14.0,
    "PRODUCTION": 12.0,
    "INVOICED": 20.0,
}

SUPPLEMENT_STAGE_PROBABILITY = 0.4


def _stage_path(rng: np.random.Generator) -> list[str]:
    """Stages a claim walks through before CLOSED; SUPPLEMENT is optional."""
    path = [s for s in CLAIM_STAGES if s != "CLOSED"]
    if rng.random() >= SUPPLEMENT_STAGE_PROBABILITY:
        path.remove("SUPPLEMENT")
    return path


def _generate_supplements(
    rng: np.random.Generator,
    entered_at: datetime,
    exited_at: datetime | None,
    as_of: datetime,
) -> list[SupplementRecord]:
    """1-3 supplements submitted while the claim sat in the SUPPLEMENT stage."""
    window_end = exited_at or as_of
    window_days = max((window_end - entered_at).total_seconds() / 86_400, 0.1)
    supplements: list[SupplementRecord] = []

    for _ in range(int(rng.integers(1, 4))):
        submitted_at = entered_at + timedelta(days=float(rng.uniform(0, window_days)))
        responded_at: datetime | None = submitted_at + timedelta(
            days=float(rng.lognormal(np.log(6.0), 0.5))
        )
        if responded_at > as_of:
            responded_at = None

        if responded_at is None:
            status = "PENDING"
        else:
            status = str(rng.choice(SUPPLEMENT_STATUSES[3:], p=[0.15, 0.45, 0.15, 0.25]))

        supplements.append(
            SupplementRecord(
                submitted_at=submitted_at,
                responded_at=responded_at,
                status=status,
                amount=round(float(rng.lognormal(7.5, 0.7)), 2),
            )
        )
    return supplements


def _generate_claim(
    rng: np.random.Generator,
    index: int,
    config: PipelineConfig,
    carrier: str | None,
    speed_factor: float,
) -> ClaimRecord:
    """Walk one claim through its stage path, stopping early if it is still open."""
    as_of = config.as_of
    created_at = as_of - timedelta(days=float(rng.uniform(0, config.history_days)))
    path = _stage_path(rng)

    stop_index = len(path)
    if rng.random() < config.open_claim_fraction:
        stop_index = int(rng.integers(0, len(path)))

    stages: list[StageEntry] = []
    supplements: list[SupplementRecord] = []
    cursor = created_at
    closed_at: datetime | None = None

    for i, stage in enumerate(path):
        duration = float(rng.lognormal(np.log(STAGE_MEDIAN_DAYS[stage]), 0.6)) * speed_factor
        exit_time: datetime | None = cursor + timedelta(days=duration)
        if i == stop_index or exit_time > as_of:
            exit_time = None

        stages.append(StageEntry(stage=stage, entered_at=cursor, exited_at=exit_time))
        if stage == "SUPPLEMENT":
            supplements.extend(_generate_supplements(rng, cursor, exit_time, as_of))
        if exit_time is None:
            break
        cursor = exit_time
    else:
        closed_at = cursor
        stages.append(StageEntry(stage="CLOSED", entered_at=cursor, exited_at=cursor))

    return ClaimRecord(
        id=f"claim-{index:06d}",
        claim_number=f"CLM-{as_of.year}-{index:06d}",
        carrier=carrier,
        status="CLOSED" if closed_at is not None else "IN_PROGRESS",
        created_at=created_at,
        closed_at=closed_at,
        total_value=round(float(rng.lognormal(9.5, 0.5)), 2),
        stages=stages,
        supplements=supplements,
    )


def generate_claims(config: PipelineConfig) -> list[ClaimRecord]:
    """Generate a synthetic claim collection.

    Args:
        config: Pipeline configuration with seed, num_claims, carrier pool,
            and the as_of anchor.

    Returns:
        List of claim records ordered by generation index.
    """
    rng = np.random.default_rng(config.seed)

    # Carrier speed factor (fixed per carrier, index-aligned with config.carriers)
    speed_factors = rng.uniform(0.7, 1.4, size=len(config.carriers))

    claims: list[ClaimRecord] = []
    for i in range(config.num_claims):
        carrier_index = int(rng.integers(0, len(config.carriers))) if config.carriers else -1
        carrier = config.carriers[carrier_index] if carrier_index >= 0 else None
        factor = float(speed_factors[carrier_index]) if carrier_index >= 0 else 1.0
        claims.append(_generate_claim(rng, i, config, carrier, factor))

    return claims
