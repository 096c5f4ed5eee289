"""Shared test fixtures for claim velocity tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from claim_velocity.config import PipelineConfig
from claim_velocity.schema import ClaimRecord, StageEntry, SupplementRecord

DAY0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _day(n: float) -> datetime:
    """Timestamp n days after DAY0."""
    return DAY0 + timedelta(days=n)


def _make_claim(
    claim_id: str,
    created: float = 0,
    closed: float | None = None,
    carrier: str | None = None,
    total_value: float = 0.0,
    stages: list[StageEntry] | None = None,
    supplements: list[SupplementRecord] | None = None,
) -> ClaimRecord:
    """Build a claim whose timestamps are expressed in days after DAY0."""
    return ClaimRecord(
        id=claim_id,
        claim_number=f"CLM-{claim_id}",
        carrier=carrier,
        status="CLOSED" if closed is not None else "OPEN",
        created_at=_day(created),
        closed_at=_day(closed) if closed is not None else None,
        total_value=total_value,
        stages=stages or [],
        supplements=supplements or [],
    )


@pytest.fixture
def day() -> Callable[[float], datetime]:
    """Factory for timestamps expressed in days after DAY0."""
    return _day


@pytest.fixture
def make_claim() -> Callable[..., ClaimRecord]:
    """Factory for claims whose timestamps are days after DAY0."""
    return _make_claim


@pytest.fixture
def now() -> datetime:
    """Fixed reference time: day 20."""
    return _day(20)


@pytest.fixture
def scenario_claims() -> list[ClaimRecord]:
    """Claim A closed in 10 days with one answered supplement; claim B still open."""
    claim_a = _make_claim(
        "A",
        created=0,
        closed=10,
        carrier="USAA",
        total_value=5000,
        stages=[
            StageEntry(stage="INTAKE", entered_at=_day(0), exited_at=_day(2)),
            StageEntry(stage="INSPECTION", entered_at=_day(2), exited_at=_day(8)),
        ],
        supplements=[
            SupplementRecord(
                submitted_at=_day(2), responded_at=_day(5), status="APPROVED", amount=1200.0
            )
        ],
    )
    claim_b = _make_claim(
        "B",
        created=0,
        carrier=None,
        stages=[
            StageEntry(stage="INTAKE", entered_at=_day(0), exited_at=_day(4)),
            StageEntry(stage="INSPECTION", entered_at=_day(4)),
        ],
    )
    return [claim_a, claim_b]


@pytest.fixture
def config() -> PipelineConfig:
    """Default test configuration with a small dataset."""
    return PipelineConfig(seed=42, num_claims=300)


@pytest.fixture
def generated_claims(config: PipelineConfig) -> list[ClaimRecord]:
    """A small synthetic claim collection."""
    from claim_velocity.generate_data import generate_claims

    return generate_claims(config)
