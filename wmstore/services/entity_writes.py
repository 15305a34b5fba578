"""Entity Writes — session-level write helpers shared by every mutating operation.

Invariants:
    - Helpers never commit: the caller's transaction() owns the boundary
    - Every record passes through core/normalize_records before it is written
    - write_defaults leaves a profile identical to a freshly created one
    - Upserts return the number of distinct rows written; a repeated id overwrites

Design Decisions:
    - session.merge for upserts: partial-key upsert without dialect-specific SQL
"""

import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from wmstore.core.domain_types import ProfileId
from wmstore.core.normalize_records import (
    catalog_key, normalize_general, normalize_machine, normalize_hero,
    normalize_artifact_values, tiers_to_storage,
)
from wmstore.core.schema_constants import ARTIFACT_STATS
from wmstore.models.general_settings import GeneralSettings
from wmstore.models.machine import Machine
from wmstore.models.hero import Hero
from wmstore.models.artifact import Artifact
from wmstore.models.optimization_result import OptimizationResult

logger = logging.getLogger(__name__)

# Tables wiped by clear/import; results survive a data reset
_DATA_TABLES = (GeneralSettings, Machine, Hero, Artifact)


async def write_general(
    db: AsyncSession, profile_id: ProfileId, general: dict | None,
) -> None:
    values = normalize_general(general)
    await db.merge(GeneralSettings(
        profile_id=profile_id,
        engineer_level=values["engineerLevel"],
        scarab_level=values["scarabLevel"],
        rift_rank=values["riftRank"],
    ))


async def upsert_machines(
    db: AsyncSession, profile_id: ProfileId, machines: list[dict],
) -> int:
    keys = set()
    for raw in machines:
        m = normalize_machine(raw)
        key = catalog_key(m["id"])
        keys.add(key)
        await db.merge(Machine(
            profile_id=profile_id,
            key=key,
            catalog_id=m["id"],
            rarity=m["rarity"],
            level=m["level"],
            blueprint_damage=m["blueprints"]["damage"],
            blueprint_health=m["blueprints"]["health"],
            blueprint_armor=m["blueprints"]["armor"],
            inscription_level=m["inscriptionLevel"],
            sacred_level=m["sacredLevel"],
        ))
    return len(keys)


async def upsert_heroes(
    db: AsyncSession, profile_id: ProfileId, heroes: list[dict],
) -> int:
    keys = set()
    for raw in heroes:
        h = normalize_hero(raw)
        key = catalog_key(h["id"])
        keys.add(key)
        await db.merge(Hero(
            profile_id=profile_id,
            key=key,
            catalog_id=h["id"],
            damage_pct=h["percentages"]["damage"],
            health_pct=h["percentages"]["health"],
            armor_pct=h["percentages"]["armor"],
        ))
    return len(keys)


async def upsert_artifacts(
    db: AsyncSession, profile_id: ProfileId, artifacts: dict,
) -> None:
    for stat, values in artifacts.items():
        if stat not in ARTIFACT_STATS:
            logger.debug(
                f"Skipping unknown artifact stat {stat!r}",
                extra={"profile_id": profile_id},
            )
            continue
        await db.merge(Artifact(
            profile_id=profile_id,
            stat=stat,
            tier_counts=tiers_to_storage(normalize_artifact_values(values)),
        ))


async def write_defaults(db: AsyncSession, profile_id: ProfileId) -> None:
    """Default general settings plus zero-filled rows for every stat × tier."""
    await write_general(db, profile_id, None)
    await upsert_artifacts(
        db, profile_id, {stat: {} for stat in ARTIFACT_STATS},
    )


async def delete_profile_data(db: AsyncSession, profile_id: ProfileId) -> None:
    """Remove general/machine/hero/artifact rows of a profile."""
    for model in _DATA_TABLES:
        await db.execute(delete(model).where(model.profile_id == profile_id))


async def delete_profile_results(db: AsyncSession, profile_id: ProfileId) -> None:
    await db.execute(
        delete(OptimizationResult).where(
            OptimizationResult.profile_id == profile_id,
        ),
    )
