"""Profile Manager — lifecycle of profiles under the single-active-profile invariant.

Invariants:
    - Whenever any profile exists, exactly one is active
    - Profile count never exceeds settings.max_profiles
    - create/switch/rename/delete each run in one transaction
    - A new profile is fully initialized (defaults + zero-filled artifacts) in the
      same transaction that inserts it
    - Deleting the active profile promotes the lowest surviving id
    - Every profile mutation stamps updated_at explicitly (no storage-level hooks)

Design Decisions:
    - Active-flag changes are ordered clear-then-set inside one transaction, so the
      partial unique index on is_active never sees two active rows
    - Invariant breaches found on read raise InvariantViolationError when
      strict_invariants is on; otherwise the lowest id is read as active (no repair)
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from wmstore.config import Settings, get_settings
from wmstore.core.domain_types import ProfileId
from wmstore.core.errors import (
    CapacityExceededError, ErrorContext, InvariantViolationError,
    NoActiveProfileError, ProfileNotFoundError, ValidationFailedError,
)
from wmstore.infrastructure.database import DatabaseSessionManager
from wmstore.models.profile import Profile
from wmstore.services.entity_writes import (
    delete_profile_data, delete_profile_results, write_defaults,
)

logger = logging.getLogger(__name__)


# -- Session-level queries (shared with EntityRepository) ----------------------

async def fetch_profile(db: AsyncSession, profile_id: ProfileId) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    return result.scalar_one_or_none()


async def fetch_active_profile(
    db: AsyncSession, strict: bool = True,
) -> Profile | None:
    """The unique active profile, checking the invariant on the way."""
    result = await db.execute(
        select(Profile).where(Profile.is_active.is_(True)).order_by(Profile.id),
    )
    active = list(result.scalars().all())
    if len(active) == 1:
        return active[0]
    if len(active) > 1:
        return _report_violation(
            f"{len(active)} active profiles", strict, active[0],
        )
    total = await db.scalar(select(func.count()).select_from(Profile))
    if not total:
        return None
    lowest = await db.scalar(select(Profile).order_by(Profile.id).limit(1))
    return _report_violation(
        f"no active profile among {total}", strict, lowest,
    )


def _report_violation(
    detail: str, strict: bool, fallback: Profile | None,
) -> Profile | None:
    if strict:
        raise InvariantViolationError(detail)
    logger.warning(f"Active profile invariant broken: {detail}")
    return fallback


async def resolve_profile(
    db: AsyncSession,
    profile_id: ProfileId | None,
    strict: bool = True,
    operation: str | None = None,
) -> Profile:
    """Explicit id if given, else the active profile. Missing → NoActiveProfileError."""
    if profile_id is None:
        profile = await fetch_active_profile(db, strict)
    else:
        profile = await fetch_profile(db, profile_id)
    if profile is None:
        raise NoActiveProfileError(
            ErrorContext(profile_id=profile_id, operation=operation),
        )
    return profile


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationFailedError(["Profile name cannot be empty"])
    return cleaned


class ProfileManager:
    """Create, switch, rename, and delete profiles."""

    def __init__(
        self, db_manager: DatabaseSessionManager, settings: Settings | None = None,
    ):
        self._db = db_manager
        self._settings = settings or get_settings()

    async def create_profile(self, name: str) -> ProfileId:
        """Insert a profile and its default data. First profile becomes active."""
        cleaned = _clean_name(name)
        async with self._db.transaction() as db:
            count = await db.scalar(select(func.count()).select_from(Profile))
            if count >= self._settings.max_profiles:
                raise CapacityExceededError(
                    self._settings.max_profiles,
                    ErrorContext(operation="create_profile"),
                )
            now = _utcnow()
            profile = Profile(
                name=cleaned, is_active=count == 0,
                created_at=now, updated_at=now,
            )
            db.add(profile)
            await db.flush()
            await write_defaults(db, ProfileId(profile.id))
            profile_id = ProfileId(profile.id)
        logger.info(
            f"Created profile {cleaned!r}",
            extra={"profile_id": profile_id, "operation": "create_profile"},
        )
        return profile_id

    async def switch_profile(self, profile_id: ProfileId) -> None:
        async with self._db.transaction() as db:
            if await fetch_profile(db, profile_id) is None:
                raise ProfileNotFoundError(
                    profile_id, ErrorContext(operation="switch_profile"),
                )
            now = _utcnow()
            await db.execute(
                update(Profile)
                .where(Profile.is_active.is_(True))
                .values(is_active=False, updated_at=now),
            )
            await db.execute(
                update(Profile)
                .where(Profile.id == profile_id)
                .values(is_active=True, updated_at=now),
            )
        logger.info(
            "Switched active profile",
            extra={"profile_id": profile_id, "operation": "switch_profile"},
        )

    async def rename_profile(self, profile_id: ProfileId, new_name: str) -> None:
        cleaned = _clean_name(new_name)
        async with self._db.transaction() as db:
            profile = await fetch_profile(db, profile_id)
            if profile is None:
                raise ProfileNotFoundError(
                    profile_id, ErrorContext(operation="rename_profile"),
                )
            profile.name = cleaned
            profile.updated_at = _utcnow()

    async def delete_profile(self, profile_id: ProfileId) -> None:
        """Remove a profile and every row scoped to it; promote a survivor if needed."""
        async with self._db.transaction() as db:
            profile = await fetch_profile(db, profile_id)
            if profile is None:
                raise ProfileNotFoundError(
                    profile_id, ErrorContext(operation="delete_profile"),
                )
            was_active = profile.is_active
            await delete_profile_data(db, profile_id)
            await delete_profile_results(db, profile_id)
            await db.execute(delete(Profile).where(Profile.id == profile_id))
            promoted = None
            if was_active:
                promoted = await db.scalar(
                    select(Profile.id).order_by(Profile.id).limit(1),
                )
                if promoted is not None:
                    await db.execute(
                        update(Profile)
                        .where(Profile.id == promoted)
                        .values(is_active=True, updated_at=_utcnow()),
                    )
        logger.info(
            f"Deleted profile (promoted: {promoted})",
            extra={"profile_id": profile_id, "operation": "delete_profile"},
        )

    async def get_active_profile(self) -> Profile | None:
        async with self._db.session() as db:
            return await fetch_active_profile(
                db, self._settings.strict_invariants,
            )

    async def get_profile(self, profile_id: ProfileId) -> Profile | None:
        async with self._db.session() as db:
            return await fetch_profile(db, profile_id)

    async def list_profiles(self) -> list[Profile]:
        async with self._db.session() as db:
            result = await db.execute(select(Profile).order_by(Profile.id))
            return list(result.scalars().all())

    async def count_profiles(self) -> int:
        async with self._db.session() as db:
            return await db.scalar(select(func.count()).select_from(Profile))

    async def initialize_profiles(self) -> Profile:
        """First-run bootstrap: ensure a default profile exists, return the active one."""
        if await self.count_profiles() == 0:
            logger.info("No profiles found, creating default profile")
            await self.create_profile(self._settings.default_profile_name)
        active = await self.get_active_profile()
        if active is None:
            raise NoActiveProfileError(ErrorContext(operation="initialize_profiles"))
        return active
