"""Save Validation — every defect collected, root rules chosen by format.

Tests cover:
    - Well-formed documents of each shape yield no defects
    - Root-level defects per format, then machine and hero defects, in order
    - Tier keys accepted as numbers or numeric strings
"""

from wmstore.core.domain_types import SaveFormat
from wmstore.core.validate_save import (
    check_heroes, check_machines, validate_save_data,
)


def _final(**overrides):
    doc = {
        "version": 1,
        "general": {"engineerLevel": 1, "scarabLevel": 0, "riftRank": "bronze"},
        "machines": [{
            "id": 1, "rarity": "Epic", "level": 3,
            "blueprints": {"damage": 0, "health": 0, "armor": 0},
        }],
        "heroes": [{"id": "h1", "percentages": {"damage": 1}}],
        "artifacts": {"damage": {"30": 1, 35: 2}},
    }
    doc.update(overrides)
    return doc


# ─── Well-formed ─────────────────────────────────────────────────

def test_valid_final_has_no_defects():
    assert validate_save_data(_final(), SaveFormat.FINAL) == []


def test_valid_legacy_has_no_defects():
    doc = {
        "engineerLevel": 5, "scarabLevel": 2, "riftRank": "bronze",
        "machines": [], "heroes": [], "artifacts": {"damage": {"30": 2}},
    }
    assert validate_save_data(doc, SaveFormat.LEGACY) == []


def test_valid_intermediate_has_no_defects():
    doc = {
        "version": 1, "timestamp": 1,
        "config": [{"key": "engineerLevel", "value": 3}],
        "machines": [], "heroes": [],
        "artifacts": [{"stat": "damage", "values": {"40": 1}}],
    }
    assert validate_save_data(doc, SaveFormat.INTERMEDIATE) == []


# ─── Root defects ────────────────────────────────────────────────

def test_final_general_must_be_object():
    defects = validate_save_data(_final(general=None), SaveFormat.FINAL)
    assert defects[0] == "Invalid general settings"


def test_final_scalar_defects_are_all_reported():
    doc = _final(general={"engineerLevel": "1", "scarabLevel": None, "riftRank": 3})
    assert validate_save_data(doc, SaveFormat.FINAL) == [
        "Invalid engineerLevel", "Invalid scarabLevel", "Invalid riftRank",
    ]


def test_artifact_structure_defects():
    assert "Invalid artifacts structure" in validate_save_data(
        _final(artifacts=[]), SaveFormat.FINAL,
    )
    defects = validate_save_data(
        _final(artifacts={"damage": {"abc": 1, "30": "x"}, "health": 5}),
        SaveFormat.FINAL,
    )
    assert defects == [
        "Artifacts for damage has non-numeric tier 'abc'",
        "Artifacts for damage tier 30 must be a number",
        "Artifacts for health must be an object",
    ]


def test_intermediate_root_defects():
    doc = {
        "version": 1, "timestamp": 1,
        "config": [{"value": 3}, "junk"],
        "machines": [], "heroes": [],
        "artifacts": [{"values": {}}],
    }
    assert validate_save_data(doc, SaveFormat.INTERMEDIATE) == [
        "Config entry 0 missing key",
        "Config entry 1 missing key",
        "Artifact entry 0 missing stat",
    ]


def test_intermediate_requires_arrays():
    doc = {"version": 1, "timestamp": 1, "config": {}, "artifacts": {},
           "machines": [], "heroes": []}
    assert validate_save_data(doc, SaveFormat.INTERMEDIATE) == [
        "Invalid config array", "Invalid artifacts array",
    ]


def test_non_object_document():
    assert validate_save_data([], SaveFormat.FINAL) == ["Save data must be a JSON object"]


# ─── Machines & heroes ───────────────────────────────────────────

def test_machine_defects_in_order():
    assert check_machines([{}, "x"]) == [
        "Machine 0 missing id",
        "Machine 0 missing valid rarity",
        "Machine 0 missing valid level",
        "Machine 0 missing blueprints object",
        "Machine 1 must be an object",
    ]


def test_machine_level_rejects_bool():
    machine = {"id": 1, "rarity": "Rare", "level": True, "blueprints": {}}
    assert check_machines([machine]) == ["Machine 0 missing valid level"]


def test_hero_defects():
    assert check_heroes([{"id": 0, "percentages": []}, 7]) == [
        "Hero 0 missing percentages object",
        "Hero 1 must be an object",
    ]


def test_collections_must_be_arrays():
    defects = validate_save_data(_final(machines=None, heroes={}), SaveFormat.FINAL)
    assert defects == ["machines must be an array", "heroes must be an array"]


def test_root_defects_precede_entity_defects():
    doc = _final(general=None, machines=[{"id": 1}])
    defects = validate_save_data(doc, SaveFormat.FINAL)
    assert defects[0] == "Invalid general settings"
    assert defects[-1] == "Machine 0 missing blueprints object"
