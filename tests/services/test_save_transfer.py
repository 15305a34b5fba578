"""Save Transfer — import/export of whole profile state.

Invariants:
    - Import replaces general/machine/hero/artifact rows in one transaction
    - Malformed, unknown, or invalid documents leave stored state untouched
    - A storage failure mid-import rolls back the clear as well as the rewrite
    - Export of a fresh profile is still a loadable canonical document
"""

import json
import logging

import pytest
from sqlalchemy.exc import SQLAlchemyError

from wmstore.core.convert_format import migrate_document
from wmstore.core.domain_types import SaveFormat
from wmstore.core.errors import (
    MalformedInputError, NoActiveProfileError, StorageError,
    UnknownFormatError, ValidationFailedError,
)
from wmstore.core.schema_constants import ARTIFACT_STATS, ARTIFACT_TIERS
from wmstore.services.save_transfer import parse_document
from tests.helpers import make_state


LEGACY_SCENARIO = {
    "engineerLevel": 5, "scarabLevel": 2, "riftRank": "bronze",
    "machines": [{
        "id": 1, "rarity": "Epic", "level": 10,
        "blueprints": {"damage": 1, "health": 1, "armor": 1},
    }],
    "heroes": [{"id": "h1", "percentages": {"damage": 5, "health": 0, "armor": 0}}],
    "artifacts": {"damage": {"30": 2}},
}


def _canonical(app_version="9.9.9"):
    """A complete Final document as it would appear on the wire."""
    doc = migrate_document({
        "version": 1, "appVersion": app_version,
        "general": {"engineerLevel": 40, "scarabLevel": 6, "riftRank": "ruby"},
        "machines": [
            {"id": 7, "rarity": "Mythic", "level": 90,
             "blueprints": {"damage": 9, "health": 8, "armor": 7},
             "inscriptionLevel": 3, "sacredLevel": 1},
            {"id": "tank", "rarity": "Rare", "level": 2,
             "blueprints": {"damage": 0, "health": 1, "armor": 0},
             "inscriptionLevel": 0, "sacredLevel": 0},
        ],
        "heroes": [{"id": 3, "percentages": {"damage": 20, "health": 10, "armor": 0}}],
        "artifacts": {"health": {"50": 3}},
    })
    return json.loads(json.dumps(doc))


def _sorted_by_id(records):
    return sorted(records, key=lambda r: json.dumps(r["id"]))


# ─── parse_document ──────────────────────────────────────────────

def test_parse_rejects_malformed_json():
    with pytest.raises(MalformedInputError):
        parse_document("{not json")


def test_parse_rejects_empty_input():
    with pytest.raises(MalformedInputError) as exc:
        parse_document("   ")
    assert exc.value.to_notification()["message"] == "Please paste save data first."


def test_parse_accepts_bytes():
    assert parse_document(b'{"a": 1}') == {"a": 1}


# ─── Import ──────────────────────────────────────────────────────

async def test_round_trip(transfer, active_profile):
    """Import a canonical document, export it, get the same document back."""
    document = _canonical()
    await transfer.import_data(json.dumps(document))
    exported = json.loads(await transfer.export_data())

    assert exported["version"] == 1
    assert exported["general"] == document["general"]
    assert exported["artifacts"] == document["artifacts"]
    assert exported["heroes"] == document["heroes"]
    assert _sorted_by_id(exported["machines"]) == _sorted_by_id(document["machines"])


async def test_legacy_import_scenario(transfer, repo, active_profile):
    report = await transfer.import_data(json.dumps(LEGACY_SCENARIO))

    assert report.source_format == SaveFormat.LEGACY
    assert report.was_converted
    assert report.needs_resave
    assert report.message == "Data loaded and converted to current format!"
    assert (report.machines, report.heroes) == (1, 1)

    state = await repo.load_state()
    assert state["engineerLevel"] == 5
    assert state["artifacts"]["damage"][30] == 2
    for stat in ARTIFACT_STATS:
        assert set(state["artifacts"][stat]) == set(ARTIFACT_TIERS)
        for tier in ARTIFACT_TIERS:
            if (stat, tier) != ("damage", 30):
                assert state["artifacts"][stat][tier] == 0


async def test_intermediate_import(transfer, repo, active_profile):
    document = {
        "version": 1, "timestamp": 1700000000000,
        "config": [{"key": "scarabLevel", "value": 4}],
        "machines": [{"id": 2, "rarity": "Rare", "level": 3, "blueprints": {}}],
        "heroes": [],
        "artifacts": [{"stat": "armor", "values": {"40": 5}}],
    }
    report = await transfer.import_data(json.dumps(document))
    assert report.source_format == SaveFormat.INTERMEDIATE

    state = await repo.load_state()
    assert state["scarabLevel"] == 4
    assert state["engineerLevel"] == 0
    assert state["artifacts"]["armor"][40] == 5


async def test_final_import_with_current_version(transfer, active_profile):
    report = await transfer.import_data(json.dumps(_canonical("9.9.9")))
    assert not report.was_converted
    assert not report.needs_resave
    assert report.message == "Data loaded successfully!"


async def test_final_import_from_older_app_needs_resave(transfer, active_profile):
    report = await transfer.import_data(json.dumps(_canonical("1.0.0")))
    assert report.source_app_version == "1.0.0"
    assert report.needs_resave


async def test_import_replaces_previous_entities(transfer, repo, active_profile):
    await repo.save_state(make_state())
    await transfer.import_data(json.dumps(LEGACY_SCENARIO))
    state = await repo.load_state()
    assert [m["id"] for m in state["machines"]] == [1]
    assert state["artifacts"]["damage"][45] == 0


async def test_import_into_explicit_profile(transfer, repo, profiles, active_profile):
    other = await profiles.create_profile("Alt")
    report = await transfer.import_data(json.dumps(LEGACY_SCENARIO), other)
    assert report.profile_id == other
    assert await repo.load_state(active_profile) is None


# ─── Import failures leave state untouched ───────────────────────

async def test_malformed_json_leaves_state(transfer, repo, active_profile):
    await repo.save_state(make_state())
    before = await repo.load_state()
    with pytest.raises(MalformedInputError):
        await transfer.import_data("{not json")
    assert await repo.load_state() == before


async def test_unknown_format_leaves_state(transfer, repo, active_profile):
    await repo.save_state(make_state())
    before = await repo.load_state()
    with pytest.raises(UnknownFormatError):
        await transfer.import_data(json.dumps({"hello": "world"}))
    assert await repo.load_state() == before


async def test_validation_failure_leaves_state(transfer, repo, active_profile, caplog):
    await repo.save_state(make_state())
    before = await repo.load_state()
    document = _canonical()
    document["general"]["engineerLevel"] = "high"
    document["machines"][0].pop("blueprints")

    with caplog.at_level(logging.WARNING):
        with pytest.raises(ValidationFailedError) as exc:
            await transfer.import_data(json.dumps(document))

    assert exc.value.message == "Invalid save data: Invalid engineerLevel"
    assert exc.value.defects == [
        "Invalid engineerLevel", "Machine 0 missing blueprints object",
    ]
    assert any(r.__dict__.get("defect_count") == 2 for r in caplog.records)
    assert await repo.load_state() == before


async def test_storage_failure_rolls_back_clear(
    transfer, repo, active_profile, monkeypatch,
):
    """The delete of old rows is undone together with the partial rewrite."""
    await repo.save_state(make_state())
    before = await repo.load_state()

    async def broken_upsert(*args, **kwargs):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(
        "wmstore.services.save_transfer.upsert_heroes", broken_upsert,
    )
    with pytest.raises(StorageError):
        await transfer.import_data(json.dumps(LEGACY_SCENARIO))
    assert await repo.load_state() == before


async def test_import_without_profiles(transfer):
    with pytest.raises(NoActiveProfileError):
        await transfer.import_data(json.dumps(LEGACY_SCENARIO))


# ─── Export ──────────────────────────────────────────────────────

async def test_export_fresh_profile_is_minimal_document(transfer, active_profile):
    exported = await transfer.export_document()
    assert exported["version"] == 1
    assert exported["appVersion"] == "9.9.9"
    assert exported["general"] == {
        "engineerLevel": 0, "scarabLevel": 0, "riftRank": "bronze",
    }
    assert exported["machines"] == []
    assert exported["heroes"] == []
    assert set(exported["artifacts"]) == set(ARTIFACT_STATS)
    assert all(v == 0 for tiers in exported["artifacts"].values() for v in tiers.values())


async def test_export_stamps_current_app_version(transfer, active_profile):
    await transfer.import_data(json.dumps(_canonical("1.0.0")))
    assert (await transfer.export_document())["appVersion"] == "9.9.9"


async def test_exported_document_reimports_as_final(transfer, active_profile):
    await transfer.import_data(json.dumps(LEGACY_SCENARIO))
    report = await transfer.import_data(await transfer.export_data())
    assert report.source_format == SaveFormat.FINAL
    assert not report.needs_resave


async def test_export_without_profiles(transfer):
    with pytest.raises(NoActiveProfileError):
        await transfer.export_data()


async def test_round_trip_without_machines(transfer, active_profile):
    """General, heroes and artifacts are exported even when no machine is stored."""
    document = _canonical()
    document["machines"] = []
    document["artifacts"]["damage"]["30"] = 4
    await transfer.import_data(json.dumps(document))
    exported = await transfer.export_document()

    assert exported["general"] == {
        "engineerLevel": 40, "scarabLevel": 6, "riftRank": "ruby",
    }
    assert exported["machines"] == []
    assert exported["heroes"] == document["heroes"]
    assert exported["artifacts"] == document["artifacts"]


async def test_import_report_counts_distinct_ids(transfer, repo, active_profile):
    """A repeated catalog id is one stored row; the later record wins."""
    document = _canonical()
    duplicate = dict(document["machines"][0], level=91)
    document["machines"].append(duplicate)
    report = await transfer.import_data(json.dumps(document))

    assert report.machines == 2
    machines = {m["id"]: m for m in (await repo.load_state())["machines"]}
    assert len(machines) == 2
    assert machines[7]["level"] == 91
