"""Save Validation — structural checks that collect every defect instead of raising.

Invariants:
    - validate_save_data never raises; an empty list means valid
    - Defects are ordered: root-level (format-specific) first, then machines, then heroes
    - Root-level rules depend on the detected format; machine/hero rules do not
    - Artifact tier keys are accepted as numbers or numeric strings

Design Decisions:
    - Return lists (not exceptions): the importer shows the first defect and logs the rest
"""

from typing import Any

from wmstore.core.detect_format import is_number
from wmstore.core.domain_types import SaveFormat
from wmstore.core.normalize_records import parse_tier


def _check_general_scalars(source: dict) -> list[str]:
    defects = []
    if not is_number(source.get("engineerLevel")):
        defects.append("Invalid engineerLevel")
    if not is_number(source.get("scarabLevel")):
        defects.append("Invalid scarabLevel")
    if not isinstance(source.get("riftRank"), str):
        defects.append("Invalid riftRank")
    return defects


def _check_tier_values(stat: Any, values: Any) -> list[str]:
    if not isinstance(values, dict):
        return [f"Artifacts for {stat} must be an object"]
    defects = []
    for key, count in values.items():
        if parse_tier(key) is None:
            defects.append(f"Artifacts for {stat} has non-numeric tier '{key}'")
        elif not is_number(count):
            defects.append(f"Artifacts for {stat} tier {key} must be a number")
    return defects


def _check_artifact_object(artifacts: Any) -> list[str]:
    if not isinstance(artifacts, dict):
        return ["Invalid artifacts structure"]
    defects = []
    for stat, values in artifacts.items():
        defects.extend(_check_tier_values(stat, values))
    return defects


def check_final_root(data: dict) -> list[str]:
    general = data.get("general")
    if not isinstance(general, dict):
        defects = ["Invalid general settings"]
    else:
        defects = _check_general_scalars(general)
    defects.extend(_check_artifact_object(data.get("artifacts")))
    return defects


def check_intermediate_root(data: dict) -> list[str]:
    defects = []
    config = data.get("config")
    if not isinstance(config, list):
        defects.append("Invalid config array")
    else:
        for i, entry in enumerate(config):
            if not isinstance(entry, dict) or not isinstance(entry.get("key"), str):
                defects.append(f"Config entry {i} missing key")

    artifacts = data.get("artifacts")
    if not isinstance(artifacts, list):
        defects.append("Invalid artifacts array")
    else:
        for i, entry in enumerate(artifacts):
            if not isinstance(entry, dict) or not isinstance(entry.get("stat"), str):
                defects.append(f"Artifact entry {i} missing stat")
                continue
            defects.extend(_check_tier_values(entry["stat"], entry.get("values")))
    return defects


def check_legacy_root(data: dict) -> list[str]:
    defects = _check_general_scalars(data)
    defects.extend(_check_artifact_object(data.get("artifacts")))
    return defects


def check_machines(machines: Any) -> list[str]:
    if not isinstance(machines, list):
        return ["machines must be an array"]
    defects = []
    for i, machine in enumerate(machines):
        if not isinstance(machine, dict):
            defects.append(f"Machine {i} must be an object")
            continue
        if machine.get("id") is None:
            defects.append(f"Machine {i} missing id")
        if not isinstance(machine.get("rarity"), str):
            defects.append(f"Machine {i} missing valid rarity")
        if not is_number(machine.get("level")):
            defects.append(f"Machine {i} missing valid level")
        if not isinstance(machine.get("blueprints"), dict):
            defects.append(f"Machine {i} missing blueprints object")
    return defects


def check_heroes(heroes: Any) -> list[str]:
    if not isinstance(heroes, list):
        return ["heroes must be an array"]
    defects = []
    for i, hero in enumerate(heroes):
        if not isinstance(hero, dict):
            defects.append(f"Hero {i} must be an object")
            continue
        if hero.get("id") is None:
            defects.append(f"Hero {i} missing id")
        if not isinstance(hero.get("percentages"), dict):
            defects.append(f"Hero {i} missing percentages object")
    return defects


_ROOT_CHECKS = {
    SaveFormat.FINAL: check_final_root,
    SaveFormat.INTERMEDIATE: check_intermediate_root,
    SaveFormat.LEGACY: check_legacy_root,
}


def validate_save_data(data: Any, fmt: SaveFormat) -> list[str]:
    """Collect every structural defect of `data` read as `fmt`."""
    if not isinstance(data, dict):
        return ["Save data must be a JSON object"]
    defects = []
    root_check = _ROOT_CHECKS.get(fmt)
    if root_check is not None:
        defects.extend(root_check(data))
    defects.extend(check_machines(data.get("machines")))
    defects.extend(check_heroes(data.get("heroes")))
    return defects
