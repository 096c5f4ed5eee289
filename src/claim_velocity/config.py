"""Configuration models for the claim velocity engine.

All tunable behavior is controlled via Pydantic models defined here.
Configuration is the single source of truth for thresholds, status sets,
and the stage remediation table.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from claim_velocity.schema import APPROVED_SUPPLEMENT_STATUSES, UNKNOWN_CARRIER, ensure_utc

FALLBACK_SUGGESTION = "Review workflow for optimization opportunities"

# Remediation advice keyed by stage name
STAGE_SUGGESTIONS: dict[str, str] = {
    "INTAKE": "Automate intake forms and collect policy details at first contact",
    "INSPECTION": "Pre-book inspection slots and batch inspections by territory",
    "ESTIMATE": "Use estimate templates and photo-based measurements to speed drafting",
    "SUBMITTED": "Follow up with the carrier within 48 hours of submission",
    "NEGOTIATION": "Prepare code citations and pricing evidence before adjuster calls",
    "APPROVED": "Order materials and schedule crews as soon as approval lands",
    "SUPPLEMENT": "Document line items with photos and submit supplements in one package",
    "PRODUCTION": "Tighten crew scheduling and confirm material delivery dates",
    "INVOICED": "Send final invoices with completion certificates the same day",
    "CLOSED": "Archive documentation and request reviews promptly",
}


class VelocityConfig(BaseModel):
    """Thresholds and lookup tables used by the velocity computations."""

    stable_threshold_pct: float = Field(
        default=5.0,
        ge=0,
        description="Absolute change percent below which a trend is 'stable'",
    )
    approved_supplement_statuses: list[str] = Field(
        default_factory=lambda: list(APPROVED_SUPPLEMENT_STATUSES),
        description="Supplement statuses counted as approved",
    )
    unknown_carrier: str = Field(
        default=UNKNOWN_CARRIER, description="Group label for claims without a carrier"
    )
    stage_suggestions: dict[str, str] = Field(
        default_factory=lambda: dict(STAGE_SUGGESTIONS),
        description="Stage name to remediation advice",
    )
    fallback_suggestion: str = Field(
        default=FALLBACK_SUGGESTION, description="Advice for stages missing from the table"
    )


class PipelineConfig(BaseModel):
    """Top-level configuration for the CLI and synthetic data generation."""

    seed: int = Field(default=42, description="Random seed for deterministic generation")
    num_claims: int = Field(default=500, ge=0, description="Number of synthetic claims")
    output_dir: Path = Field(default=Path("output"), description="Root output directory")
    period_days: int = Field(default=90, description="Lookback window for velocity metrics")
    as_of: datetime = Field(
        default=datetime(2025, 6, 30, tzinfo=timezone.utc),
        description="Anchor timestamp for generated claim histories",
    )
    history_days: int = Field(
        default=365, ge=1, description="Span of intake dates in generated data"
    )
    open_claim_fraction: float = Field(
        default=0.25, ge=0, le=1, description="Share of generated claims left open"
    )
    carriers: list[str | None] = Field(
        default_factory=lambda: [
            "State Farm",
            "Allstate",
            "USAA",
            "Liberty Mutual",
            "Farmers",
            None,
        ],
        description="Carrier pool for generated claims (None = no carrier recorded)",
    )

    # Sub-configs
    velocity: VelocityConfig = Field(default_factory=VelocityConfig)

    @field_validator("as_of")
    @classmethod
    def _as_of_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)  # type: ignore[return-value]


def get_stage_suggestion(
    stage: str,
    suggestions: dict[str, str] | None = None,
    fallback: str = FALLBACK_SUGGESTION,
) -> str:
    """Look up the remediation advice for a stage name."""
    table = STAGE_SUGGESTIONS if suggestions is None else suggestions
    return table.get(stage, fallback)
