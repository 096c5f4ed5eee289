"""Schema definitions for claim pipeline records.

Provides:
- Pydantic models for the claim, stage, and supplement records handed in by callers.
- Constants for enum-like field values.

Records accept camelCase keys (the JSON shape produced by the data-access
layer) as well as snake_case field names.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Enum-like constants
# ---------------------------------------------------------------------------
CLAIM_STAGES = [
    "INTAKE",
    "INSPECTION",
    "ESTIMATE",
    "SUBMITTED",
    "NEGOTIATION",
    "APPROVED",
    "SUPPLEMENT",
    "PRODUCTION",
    "INVOICED",
    "CLOSED",
]
SUPPLEMENT_STATUSES = ["DRAFT", "SUBMITTED", "PENDING", "PARTIAL", "APPROVED", "DENIED", "PAID"]
APPROVED_SUPPLEMENT_STATUSES = ["APPROVED", "PAID"]
UNKNOWN_CARRIER = "Unknown"

CAMEL_CASE = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Pydantic record models
# ---------------------------------------------------------------------------
class StageEntry(BaseModel):
    """One stay of a claim in a workflow stage. exited_at=None means current stage."""

    model_config = CAMEL_CASE

    stage: str
    entered_at: datetime
    exited_at: datetime | None = None

    @field_validator("entered_at", "exited_at")
    @classmethod
    def _normalize_tz(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class SupplementRecord(BaseModel):
    """A supplemental payment request sent to the carrier."""

    model_config = CAMEL_CASE

    submitted_at: datetime | None = None
    responded_at: datetime | None = None
    status: str = "DRAFT"
    amount: float = 0.0

    @field_validator("submitted_at", "responded_at")
    @classmethod
    def _normalize_tz(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class ClaimRecord(BaseModel):
    """A single claim with its stage history and supplements."""

    model_config = CAMEL_CASE

    id: str
    claim_number: str
    carrier: str | None = None
    status: str = "OPEN"
    created_at: datetime
    closed_at: datetime | None = None
    total_value: float = 0.0
    stages: list[StageEntry] = Field(default_factory=list)
    supplements: list[SupplementRecord] = Field(default_factory=list)

    @field_validator("created_at", "closed_at")
    @classmethod
    def _normalize_tz(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)

    @field_validator("total_value", mode="before")
    @classmethod
    def _default_total_value(cls, v: object) -> object:
        return 0.0 if v is None else v
