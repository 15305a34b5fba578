"""Record Normalization — pre-write coercion applied at the repository boundary.

Invariants:
    - Numeric entity fields leave this module as non-negative ints (never NaN, never < 0)
    - Hero percentages are clamped to 0..MAX_HERO_PERCENTAGE
    - Artifact values cover exactly the known tiers; unknown or non-numeric tiers are dropped
    - Tier keys compare by numeric value: 30, "30" and 30.0 are the same tier
    - All functions are pure and return fresh dicts

Design Decisions:
    - One explicit normalization step instead of storage-level hooks, so every write
      path (save_state, import_data, clear_profile_data) runs the same coercion
"""

import json
import math
from typing import Any

from wmstore.core.domain_types import CatalogId
from wmstore.core.schema_constants import (
    ARTIFACT_TIERS, BLUEPRINT_STATS, HERO_PERCENTAGE_STATS,
    MAX_HERO_PERCENTAGE, DEFAULT_RARITY, DEFAULT_RIFT_RANK,
    default_general,
)


def coerce_non_negative_int(value: Any, default: int = 0) -> int:
    """Coerce a loosely typed JSON value to an int >= 0."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        value = int(value)
    if not isinstance(value, int):
        return default
    return max(0, value)


def parse_tier(key: Any) -> int | None:
    """Numeric value of an artifact tier key, or None when not numeric."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    try:
        number = float(key)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer():
        return None
    return int(number)


def catalog_key(catalog_id: CatalogId) -> str:
    """Row key for a catalog id. JSON encoding keeps 1 and "1" distinct."""
    return json.dumps(catalog_id, sort_keys=True)


def normalize_general(general: dict | None) -> dict:
    if not general:
        return default_general()
    rift_rank = general.get("riftRank")
    return {
        "engineerLevel": coerce_non_negative_int(general.get("engineerLevel")),
        "scarabLevel": coerce_non_negative_int(general.get("scarabLevel")),
        "riftRank": rift_rank if isinstance(rift_rank, str) and rift_rank else DEFAULT_RIFT_RANK,
    }


def normalize_machine(machine: dict) -> dict:
    blueprints = machine.get("blueprints")
    if not isinstance(blueprints, dict):
        blueprints = {}
    rarity = machine.get("rarity")
    return {
        "id": machine["id"],
        "rarity": rarity if isinstance(rarity, str) and rarity else DEFAULT_RARITY,
        "level": coerce_non_negative_int(machine.get("level")),
        "blueprints": {
            stat: coerce_non_negative_int(blueprints.get(stat))
            for stat in BLUEPRINT_STATS
        },
        "inscriptionLevel": coerce_non_negative_int(machine.get("inscriptionLevel")),
        "sacredLevel": coerce_non_negative_int(machine.get("sacredLevel")),
    }


def normalize_hero(hero: dict) -> dict:
    percentages = hero.get("percentages")
    if not isinstance(percentages, dict):
        percentages = {}
    return {
        "id": hero["id"],
        "percentages": {
            stat: min(
                coerce_non_negative_int(percentages.get(stat)),
                MAX_HERO_PERCENTAGE,
            )
            for stat in HERO_PERCENTAGE_STATS
        },
    }


def normalize_artifact_values(values: dict | None) -> dict[int, int]:
    """Complete tier → count mapping over the known tiers."""
    counts = {tier: 0 for tier in ARTIFACT_TIERS}
    if not isinstance(values, dict):
        return counts
    for key, count in values.items():
        tier = parse_tier(key)
        if tier in counts:
            counts[tier] = coerce_non_negative_int(count)
    return counts


def tiers_from_storage(values: dict) -> dict[int, int]:
    """JSON columns hand back string keys; restore numeric tiers."""
    return normalize_artifact_values(values)


def tiers_to_storage(values: dict[int, int]) -> dict[str, int]:
    return {str(tier): count for tier, count in values.items()}
