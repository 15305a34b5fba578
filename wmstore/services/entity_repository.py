"""Entity Repository — profile-scoped CRUD over settings, machines, heroes, artifacts, results.

Invariants:
    - save_state, save_result, clear_profile_data each run in one transaction
    - save_state upserts what it is given and leaves unmentioned rows untouched
    - save_result leaves exactly one row per (profile, mode); mode is an OptimizeMode
    - save_state rejects malformed machines/heroes before opening a transaction
    - load_state returns None for a profile with no machine rows (fresh profile)
    - profile_id=None means "the active profile", read fresh per call

Design Decisions:
    - Composition happens here, not in the ORM: callers get plain dicts in the
      canonical field names (engineerLevel, blueprints, ...)
"""

import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wmstore.config import Settings, get_settings
from wmstore.core.domain_types import OptimizeMode, ProfileId
from wmstore.core.errors import (
    ErrorContext, InvariantViolationError, NoActiveProfileError,
    ValidationFailedError,
)
from wmstore.core.validate_save import check_heroes, check_machines
from wmstore.infrastructure.database import DatabaseSessionManager
from wmstore.models.artifact import Artifact
from wmstore.models.general_settings import GeneralSettings
from wmstore.models.hero import Hero
from wmstore.models.machine import Machine
from wmstore.models.optimization_result import OptimizationResult
from wmstore.services.entity_writes import (
    delete_profile_data, upsert_artifacts, upsert_heroes, upsert_machines,
    write_defaults, write_general,
)
from wmstore.services.profile_manager import resolve_profile

logger = logging.getLogger(__name__)


def _general_from_state(state: dict) -> dict:
    """Accept both flat ({engineerLevel, ...}) and nested ({general: {...}}) states."""
    general = state.get("general")
    if isinstance(general, dict):
        return general
    return {
        "engineerLevel": state.get("engineerLevel"),
        "scarabLevel": state.get("scarabLevel"),
        "riftRank": state.get("riftRank"),
    }


def _check_state(state: Any) -> None:
    """Reject states the write helpers cannot normalize."""
    if not isinstance(state, dict):
        raise ValidationFailedError(
            ["State must be an object"], ErrorContext(operation="save_state"),
        )
    defects = check_machines(state.get("machines") or [])
    defects.extend(check_heroes(state.get("heroes") or []))
    if not isinstance(state.get("artifacts") or {}, dict):
        defects.append("Invalid artifacts structure")
    if defects:
        logger.warning(
            f"Rejected state: {defects}",
            extra={"operation": "save_state", "defect_count": len(defects)},
        )
        raise ValidationFailedError(defects, ErrorContext(operation="save_state"))


def _check_mode(mode: Any, operation: str) -> str:
    try:
        return OptimizeMode(mode).value
    except ValueError:
        raise ValidationFailedError(
            [f"Unknown optimize mode '{mode}'"], ErrorContext(operation=operation),
        )


async def compose_state(db: AsyncSession, profile_id: ProfileId) -> dict | None:
    """Every stored row of a profile as one state dict; None without general settings."""
    general = await db.get(GeneralSettings, profile_id)
    if general is None:
        return None
    machines = (await db.execute(
        select(Machine).where(Machine.profile_id == profile_id)
        .order_by(Machine.key),
    )).scalars().all()
    heroes = (await db.execute(
        select(Hero).where(Hero.profile_id == profile_id).order_by(Hero.key),
    )).scalars().all()
    artifacts = (await db.execute(
        select(Artifact).where(Artifact.profile_id == profile_id),
    )).scalars().all()
    return {
        **general.to_dict(),
        "machines": [m.to_dict() for m in machines],
        "heroes": [h.to_dict() for h in heroes],
        "artifacts": {a.stat: a.tiers() for a in artifacts},
    }


async def read_state(db: AsyncSession, profile_id: ProfileId) -> dict | None:
    """Stored state of a profile, or None when it has no machines (fresh profile)."""
    count = await db.scalar(
        select(func.count()).select_from(Machine)
        .where(Machine.profile_id == profile_id),
    )
    if not count:
        return None
    return await compose_state(db, profile_id)


class EntityRepository:
    """Typed persistence for one profile's optimizer state."""

    def __init__(
        self, db_manager: DatabaseSessionManager, settings: Settings | None = None,
    ):
        self._db = db_manager
        self._settings = settings or get_settings()

    async def _resolve(
        self, db: AsyncSession, profile_id: ProfileId | None, operation: str,
    ) -> ProfileId:
        profile = await resolve_profile(
            db, profile_id, self._settings.strict_invariants, operation,
        )
        return ProfileId(profile.id)

    async def save_state(
        self, state: dict, profile_id: ProfileId | None = None,
    ) -> ProfileId:
        """Overwrite general settings and upsert every machine/hero/artifact given."""
        _check_state(state)
        async with self._db.transaction() as db:
            pid = await self._resolve(db, profile_id, "save_state")
            await write_general(db, pid, _general_from_state(state))
            machines = await upsert_machines(db, pid, state.get("machines") or [])
            heroes = await upsert_heroes(db, pid, state.get("heroes") or [])
            await upsert_artifacts(db, pid, state.get("artifacts") or {})
        logger.debug(
            f"Saved state ({machines} machines, {heroes} heroes)",
            extra={"profile_id": pid, "operation": "save_state"},
        )
        return pid

    async def load_state(self, profile_id: ProfileId | None = None) -> dict | None:
        async with self._db.session() as db:
            try:
                pid = await self._resolve(db, profile_id, "load_state")
            except NoActiveProfileError:
                return None
            return await read_state(db, pid)

    async def save_result(
        self, mode: str, result: Any, profile_id: ProfileId | None = None,
    ) -> None:
        """Replace the cached result for (profile, mode)."""
        mode = _check_mode(mode, "save_result")
        async with self._db.transaction() as db:
            pid = await self._resolve(db, profile_id, "save_result")
            await db.execute(
                delete(OptimizationResult).where(
                    OptimizationResult.profile_id == pid,
                    OptimizationResult.mode == mode,
                ),
            )
            db.add(OptimizationResult(profile_id=pid, mode=mode, result=result))
        logger.debug(
            "Cached optimization result",
            extra={"profile_id": pid, "operation": "save_result", "mode": mode},
        )

    async def get_latest_result(
        self, mode: str, profile_id: ProfileId | None = None,
    ) -> Any | None:
        mode = _check_mode(mode, "get_latest_result")
        async with self._db.session() as db:
            try:
                pid = await self._resolve(db, profile_id, "get_latest_result")
            except NoActiveProfileError:
                return None
            row = await db.scalar(
                select(OptimizationResult).where(
                    OptimizationResult.profile_id == pid,
                    OptimizationResult.mode == mode,
                ),
            )
            return row.result if row is not None else None

    async def clear_profile_data(self, profile_id: ProfileId | None = None) -> ProfileId:
        """Reset a profile's data to its just-created state; the profile survives."""
        async with self._db.transaction() as db:
            pid = await self._resolve(db, profile_id, "clear_profile_data")
            await delete_profile_data(db, pid)
            await write_defaults(db, pid)
        logger.info(
            "Reset profile data to defaults",
            extra={"profile_id": pid, "operation": "clear_profile_data"},
        )
        return pid

    async def get_general(self, profile_id: ProfileId | None = None) -> dict:
        """General settings even for a fresh profile (load_state returns None there)."""
        async with self._db.session() as db:
            pid = await self._resolve(db, profile_id, "get_general")
            general = await db.get(GeneralSettings, pid)
            if general is None:
                raise InvariantViolationError(
                    "profile has no general settings",
                    ErrorContext(profile_id=pid, operation="get_general"),
                )
            return general.to_dict()

    async def get_artifacts(
        self, profile_id: ProfileId | None = None,
    ) -> dict[str, dict[int, int]]:
        async with self._db.session() as db:
            pid = await self._resolve(db, profile_id, "get_artifacts")
            rows = (await db.execute(
                select(Artifact).where(Artifact.profile_id == pid),
            )).scalars().all()
            return {a.stat: a.tiers() for a in rows}
