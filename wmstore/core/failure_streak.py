"""Failure Streak Throttle — decides when a repeated failure deserves a notification.

Invariants:
    - The first failure of a streak notifies; later identical failures do not
    - A different error code starts a new streak
    - A success ends the streak
"""

from dataclasses import dataclass


@dataclass
class FailureStreakThrottle:
    """Per-operation failure streak state — pure dataclass, no IO."""

    notify_once: bool = True
    streak_code: str | None = None
    streak_length: int = 0

    def record_failure(self, code: str) -> bool:
        """Register a failure. Returns True when the caller should notify."""
        if code != self.streak_code:
            self.streak_code = code
            self.streak_length = 1
            return True
        self.streak_length += 1
        return not self.notify_once

    def record_success(self) -> None:
        self.streak_code = None
        self.streak_length = 0

    @property
    def in_streak(self) -> bool:
        return self.streak_length > 0
