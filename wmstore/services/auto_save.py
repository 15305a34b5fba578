"""Auto-Save — convenience layer over save_state for a caller-owned debounce timer.

Invariants:
    - last_saved only ever holds a state that was fully persisted
    - A failed save leaves last_saved at the previous good value (never emptied)
    - One notification per failure streak when notify_once is on
    - Safe to call again on the next trigger: save_state is a single transaction
"""

import copy
import logging

from wmstore.core.domain_types import ProfileId
from wmstore.core.errors import WMStoreError
from wmstore.core.failure_streak import FailureStreakThrottle
from wmstore.core.repository_protocols import StateStore
from wmstore.schemas.operation import Notification, OperationResult

logger = logging.getLogger(__name__)


class AutoSaver:
    """Persists snapshots of the in-memory state; never schedules itself."""

    def __init__(self, repository: StateStore, notify_once: bool = True):
        self._repository = repository
        self._throttle = FailureStreakThrottle(notify_once=notify_once)
        self.last_saved: dict | None = None

    @property
    def failing(self) -> bool:
        return self._throttle.in_streak

    async def save(
        self, state: dict, profile_id: ProfileId | None = None,
    ) -> OperationResult:
        try:
            pid = await self._repository.save_state(state, profile_id)
        except WMStoreError as e:
            notify = self._throttle.record_failure(e.code)
            logger.error(
                f"Auto-save failed: {e.message}",
                extra={
                    "profile_id": profile_id, "operation": "auto_save",
                    "error_code": e.code,
                    "streak_length": self._throttle.streak_length,
                },
            )
            note = Notification(**e.to_notification()) if notify else None
            return OperationResult(
                ok=False, error=e.to_response()["error"], notification=note,
            )
        self._throttle.record_success()
        self.last_saved = copy.deepcopy(state)
        return OperationResult.success(value=pid)
