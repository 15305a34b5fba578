"""Record Normalization — coercion applied before every write.

Tests cover:
    - coerce_non_negative_int over loose JSON values
    - Tier key parsing by numeric value
    - Machine/hero normalization defaults and clamping
    - Catalog keys keep 1 and "1" apart
"""

import math

import pytest

from wmstore.core.normalize_records import (
    catalog_key,
    coerce_non_negative_int,
    normalize_artifact_values,
    normalize_general,
    normalize_hero,
    normalize_machine,
    parse_tier,
    tiers_to_storage,
)
from wmstore.core.schema_constants import ARTIFACT_TIERS


@pytest.mark.parametrize("value, expected", [
    (5, 5),
    (-3, 0),
    (2.9, 2),
    ("7", 7),
    (" 4 ", 4),
    ("abc", 0),
    (None, 0),
    (True, 0),
    (math.nan, 0),
    (math.inf, 0),
    ([1], 0),
])
def test_coerce_non_negative_int(value, expected):
    assert coerce_non_negative_int(value) == expected


@pytest.mark.parametrize("key, expected", [
    (30, 30), ("30", 30), (30.0, 30), ("30.0", 30),
    ("30.5", None), ("abc", None), (None, None), (False, None),
])
def test_parse_tier(key, expected):
    assert parse_tier(key) == expected


def test_catalog_key_distinguishes_int_and_str():
    assert catalog_key(1) != catalog_key("1")
    assert catalog_key("cannon") == '"cannon"'


def test_normalize_general_defaults():
    assert normalize_general(None) == {
        "engineerLevel": 0, "scarabLevel": 0, "riftRank": "bronze",
    }
    assert normalize_general({"engineerLevel": -1, "scarabLevel": "3", "riftRank": ""}) == {
        "engineerLevel": 0, "scarabLevel": 3, "riftRank": "bronze",
    }


def test_normalize_machine_fills_missing_fields():
    machine = normalize_machine({"id": "m", "level": 4})
    assert machine == {
        "id": "m", "rarity": "common", "level": 4,
        "blueprints": {"damage": 0, "health": 0, "armor": 0},
        "inscriptionLevel": 0, "sacredLevel": 0,
    }


def test_normalize_hero_clamps_percentages():
    hero = normalize_hero({"id": 2, "percentages": {"damage": 35, "health": -4}})
    assert hero["percentages"] == {"damage": 20, "health": 0, "armor": 0}


def test_artifact_values_cover_known_tiers_only():
    counts = normalize_artifact_values({"30": 3, 70: 9, "x": 1, 65.0: 2})
    assert set(counts) == set(ARTIFACT_TIERS)
    assert counts[30] == 3
    assert counts[65] == 2
    assert 70 not in counts


def test_tiers_to_storage_uses_string_keys():
    assert tiers_to_storage({30: 1}) == {"30": 1}
