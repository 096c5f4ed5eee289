"""Data ingestion module.

Loads claim collections from JSON files into validated ClaimRecord models
and writes claims and snapshots back out as camelCase JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from claim_velocity.schema import ClaimRecord
from claim_velocity.velocity import VelocitySnapshot

logger = logging.getLogger(__name__)

_CLAIMS_ADAPTER = TypeAdapter(list[ClaimRecord])


def load_claims(path: Path) -> list[ClaimRecord]:
    """Load claims from a JSON array file.

    Args:
        path: Path to the JSON file.

    Returns:
        List of validated claim records.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or records fail validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Claims file not found: {path}")

    try:
        claims = parse_claims(path.read_bytes())
    except ValueError as e:
        raise ValueError(f"Failed to read claims file {path}: {e}") from e

    logger.debug("Loaded %d claims from %s", len(claims), path)
    return claims


def save_claims(claims: list[ClaimRecord], path: Path) -> Path:
    """Save claims to a JSON file with camelCase keys.

    Returns:
        The path written to.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(_CLAIMS_ADAPTER.dump_json(claims, by_alias=True, indent=2))
    return path


def save_snapshot(snapshot: VelocitySnapshot, path: Path) -> Path:
    """Save a velocity snapshot to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.to_json())
    return path


def parse_claims(raw: str | bytes) -> list[ClaimRecord]:
    """Validate an in-memory JSON payload of claim records."""
    try:
        return _CLAIMS_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid claim records: {e}") from e


def snapshot_to_dict(snapshot: VelocitySnapshot) -> dict:
    """Plain JSON-compatible dict with camelCase keys."""
    return json.loads(snapshot.to_json(indent=None))
