"""Persistence API — the façade UI collaborators call; every store error becomes a result.

Invariants:
    - Every public method returns an OperationResult; WMStoreError never escapes
    - InvariantViolationError is the exception: it propagates (programmer error)
    - Storage failures notify once per streak per operation; domain errors always notify

Design Decisions:
    - Explicit method per operation (no __getattr__ forwarding): the surface is greppable
"""

import logging
from typing import Any, Awaitable, Callable

from wmstore.config import Settings, get_settings
from wmstore.core.domain_types import ProfileId
from wmstore.core.errors import (
    InvariantViolationError, StorageError, WMStoreError,
)
from wmstore.core.failure_streak import FailureStreakThrottle
from wmstore.core.repository_protocols import ProfileStore, StateStore
from wmstore.infrastructure.database import DatabaseSessionManager
from wmstore.schemas.operation import Notification, OperationResult, ProfileRead
from wmstore.services.auto_save import AutoSaver
from wmstore.services.entity_repository import EntityRepository
from wmstore.services.profile_manager import ProfileManager
from wmstore.services.save_transfer import SaveTransfer

logger = logging.getLogger(__name__)


class PersistenceAPI:
    """Profile, state, result-cache, and import/export operations as structured results."""

    def __init__(
        self, db_manager: DatabaseSessionManager, settings: Settings | None = None,
    ):
        self._settings = settings or get_settings()
        self.profiles: ProfileStore = ProfileManager(db_manager, self._settings)
        self.repository: StateStore = EntityRepository(db_manager, self._settings)
        self.transfer = SaveTransfer(db_manager, self._settings)
        self.auto_saver = AutoSaver(
            self.repository, self._settings.storage_failure_notify_once,
        )
        self._storage_throttles: dict[str, FailureStreakThrottle] = {}

    async def _run(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
        success_message: str | Callable[[Any], str] | None = None,
    ) -> OperationResult:
        throttle = self._storage_throttles.setdefault(
            operation,
            FailureStreakThrottle(self._settings.storage_failure_notify_once),
        )
        try:
            value = await call()
        except InvariantViolationError:
            raise
        except WMStoreError as e:
            notify = True
            if isinstance(e, StorageError):
                notify = throttle.record_failure(e.code)
            logger.error(
                f"{operation} failed: {e.message}",
                extra={
                    "operation": operation, "error_code": e.code,
                    "profile_id": e.context.profile_id,
                },
            )
            return OperationResult(
                ok=False,
                error=e.to_response()["error"],
                notification=Notification(**e.to_notification()) if notify else None,
            )
        throttle.record_success()
        message = success_message(value) if callable(success_message) else success_message
        return OperationResult.success(value=value, message=message)

    # ─── Profiles ────────────────────────────────────────────────

    async def initialize(self) -> OperationResult:
        async def call():
            return ProfileRead.model_validate(await self.profiles.initialize_profiles())
        return await self._run("initialize_profiles", call)

    async def create_profile(self, name: str) -> OperationResult:
        return await self._run(
            "create_profile",
            lambda: self.profiles.create_profile(name),
            f"Profile '{(name or '').strip()}' created",
        )

    async def switch_profile(self, profile_id: ProfileId) -> OperationResult:
        return await self._run(
            "switch_profile", lambda: self.profiles.switch_profile(profile_id),
        )

    async def rename_profile(self, profile_id: ProfileId, new_name: str) -> OperationResult:
        return await self._run(
            "rename_profile",
            lambda: self.profiles.rename_profile(profile_id, new_name),
            "Profile renamed",
        )

    async def delete_profile(self, profile_id: ProfileId) -> OperationResult:
        return await self._run(
            "delete_profile",
            lambda: self.profiles.delete_profile(profile_id),
            "Profile deleted",
        )

    async def get_active_profile(self) -> OperationResult:
        async def call():
            profile = await self.profiles.get_active_profile()
            return ProfileRead.model_validate(profile) if profile else None
        return await self._run("get_active_profile", call)

    async def list_profiles(self) -> OperationResult:
        async def call():
            return [
                ProfileRead.model_validate(p)
                for p in await self.profiles.list_profiles()
            ]
        return await self._run("list_profiles", call)

    # ─── State & results ─────────────────────────────────────────

    async def save_state(
        self, state: dict, profile_id: ProfileId | None = None,
    ) -> OperationResult:
        return await self._run(
            "save_state", lambda: self.repository.save_state(state, profile_id),
        )

    async def auto_save(
        self, state: dict, profile_id: ProfileId | None = None,
    ) -> OperationResult:
        return await self.auto_saver.save(state, profile_id)

    async def load_state(self, profile_id: ProfileId | None = None) -> OperationResult:
        return await self._run(
            "load_state", lambda: self.repository.load_state(profile_id),
        )

    async def save_result(
        self, mode: str, result: Any, profile_id: ProfileId | None = None,
    ) -> OperationResult:
        return await self._run(
            "save_result",
            lambda: self.repository.save_result(mode, result, profile_id),
        )

    async def get_latest_result(
        self, mode: str, profile_id: ProfileId | None = None,
    ) -> OperationResult:
        return await self._run(
            "get_latest_result",
            lambda: self.repository.get_latest_result(mode, profile_id),
        )

    async def clear_profile_data(
        self, profile_id: ProfileId | None = None,
    ) -> OperationResult:
        return await self._run(
            "clear_profile_data",
            lambda: self.repository.clear_profile_data(profile_id),
            "All data reset to default values",
        )

    # ─── Import / export ─────────────────────────────────────────

    async def import_data(
        self, raw_json: str | bytes, profile_id: ProfileId | None = None,
    ) -> OperationResult:
        return await self._run(
            "import_data",
            lambda: self.transfer.import_data(raw_json, profile_id),
            lambda report: report.message,
        )

    async def export_data(self, profile_id: ProfileId | None = None) -> OperationResult:
        return await self._run(
            "export_data",
            lambda: self.transfer.export_data(profile_id),
            "Data prepared for saving.",
        )
