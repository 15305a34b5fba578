"""Save Migration — converts every recognized save shape into the canonical (Final) shape.

Invariants:
    - Inputs are never mutated; every function returns a fresh document
    - migrate_document(migrate_document(d)) == migrate_document(d) for every recognized shape
    - fill_missing_defaults always runs last: the result covers every stat × tier
    - UNKNOWN shapes raise UnknownFormatError (fail closed)

Design Decisions:
    - One explicit converter per non-canonical tag, dispatched from a dict
    - app_version stamping on conversion is an explicit argument, not inferred
"""

import copy
from typing import Any, Callable

from wmstore.core.detect_format import detect_save_format
from wmstore.core.domain_types import SaveFormat
from wmstore.core.errors import UnknownFormatError
from wmstore.core.normalize_records import parse_tier
from wmstore.core.schema_constants import (
    ARTIFACT_STATS, ARTIFACT_TIERS, GENERAL_FIELDS, SAVE_VERSION,
    default_general,
)


def _stamp(document: dict, app_version: str | None) -> dict:
    if app_version:
        document["appVersion"] = app_version
    return document


def convert_legacy_to_final(data: dict, app_version: str | None = None) -> dict:
    """Wrap root scalars into `general`; machines/heroes/artifacts pass through."""
    document = {
        "version": SAVE_VERSION,
        "general": {field: data[field] for field in GENERAL_FIELDS},
        "machines": copy.deepcopy(data.get("machines", [])),
        "heroes": copy.deepcopy(data.get("heroes", [])),
        "artifacts": copy.deepcopy(data.get("artifacts", {})),
    }
    return _stamp(document, app_version)


def convert_intermediate_to_final(data: dict, app_version: str | None = None) -> dict:
    """Fold the config array into `general` and the artifacts array into a dict."""
    config = {
        entry.get("key"): entry.get("value")
        for entry in data.get("config", [])
        if isinstance(entry, dict)
    }
    general = default_general()
    for field in GENERAL_FIELDS:
        if config.get(field) is not None:
            general[field] = config[field]

    artifacts = {}
    for entry in data.get("artifacts", []):
        if isinstance(entry, dict) and "stat" in entry:
            artifacts[entry["stat"]] = copy.deepcopy(entry.get("values", {}))

    document = {
        "version": SAVE_VERSION,
        "general": general,
        "machines": copy.deepcopy(data.get("machines", [])),
        "heroes": copy.deepcopy(data.get("heroes", [])),
        "artifacts": artifacts,
    }
    return _stamp(document, app_version)


def convert_final(data: dict, app_version: str | None = None) -> dict:
    """Canonical documents are already final; never restamped."""
    return copy.deepcopy(data)


_CONVERTERS: dict[SaveFormat, Callable[[dict, str | None], dict]] = {
    SaveFormat.LEGACY: convert_legacy_to_final,
    SaveFormat.INTERMEDIATE: convert_intermediate_to_final,
    SaveFormat.FINAL: convert_final,
}


def convert_to_final(
    data: dict, fmt: SaveFormat, app_version: str | None = None,
) -> dict:
    """Dispatch to the converter for an already-detected format."""
    converter = _CONVERTERS.get(fmt)
    if converter is None:
        raise UnknownFormatError()
    return converter(data, app_version)


def _complete_tiers(values: Any) -> dict:
    tiers: dict = {}
    if isinstance(values, dict):
        for key, count in values.items():
            tier = parse_tier(key)
            if tier is not None:
                tiers[tier] = count
    for tier in ARTIFACT_TIERS:
        tiers.setdefault(tier, 0)
    return tiers


def fill_missing_defaults(document: dict) -> dict:
    """Complete the artifact stat × tier space and machine optional fields."""
    filled = copy.deepcopy(document)

    artifacts = filled.get("artifacts")
    if not isinstance(artifacts, dict):
        artifacts = {}
    for stat in ARTIFACT_STATS:
        artifacts[stat] = _complete_tiers(artifacts.get(stat))
    for stat in list(artifacts):
        if stat not in ARTIFACT_STATS and isinstance(artifacts[stat], dict):
            artifacts[stat] = _complete_tiers(artifacts[stat])
    filled["artifacts"] = artifacts

    for machine in filled.get("machines") or []:
        if isinstance(machine, dict):
            machine.setdefault("inscriptionLevel", 0)
            machine.setdefault("sacredLevel", 0)
    return filled


def migrate_document(data: Any, app_version: str | None = None) -> dict:
    """Detect, convert, and default-fill. Raises UnknownFormatError when undetected."""
    fmt = detect_save_format(data)
    if fmt == SaveFormat.UNKNOWN:
        raise UnknownFormatError()
    return fill_missing_defaults(convert_to_final(data, fmt, app_version))
