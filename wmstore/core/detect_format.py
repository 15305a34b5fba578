"""Save Format Detection — total, ordered shape predicate over parsed JSON.

Invariants:
    - detect_save_format is total: every input maps to exactly one SaveFormat
    - Predicates are checked Legacy → Intermediate → Final; first match wins
    - Anything that is not a JSON object is UNKNOWN (fails closed, no guessing)

Design Decisions:
    - bool is excluded from "number" checks: JSON true must never pass as a level
"""

from typing import Any

from wmstore.core.domain_types import SaveFormat
from wmstore.core.schema_constants import SAVE_VERSION


def is_number(value: Any) -> bool:
    """JSON number check (int or float, never bool)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_save_version(value: Any) -> bool:
    return is_number(value) and value == SAVE_VERSION


def is_legacy(data: dict) -> bool:
    """Flat root scalars, no version, artifacts as a non-array value."""
    return (
        is_number(data.get("engineerLevel"))
        and is_number(data.get("scarabLevel"))
        and isinstance(data.get("riftRank"), str)
        and not data.get("version")
        and bool(data.get("artifacts"))
        and not isinstance(data.get("artifacts"), list)
    )


def is_intermediate(data: dict) -> bool:
    """version 1 with a timestamp and a {key, value} config array."""
    return (
        is_save_version(data.get("version"))
        and isinstance(data.get("config"), list)
        and bool(data.get("timestamp"))
    )


def is_final(data: dict) -> bool:
    """version 1 with a nested general object."""
    return (
        is_save_version(data.get("version"))
        and isinstance(data.get("general"), dict)
    )


_DETECTORS = (
    (SaveFormat.LEGACY, is_legacy),
    (SaveFormat.INTERMEDIATE, is_intermediate),
    (SaveFormat.FINAL, is_final),
)


def detect_save_format(data: Any) -> SaveFormat:
    """Classify a parsed document. Short-circuits on the first matching shape."""
    if not isinstance(data, dict):
        return SaveFormat.UNKNOWN
    for fmt, predicate in _DETECTORS:
        if predicate(data):
            return fmt
    return SaveFormat.UNKNOWN
