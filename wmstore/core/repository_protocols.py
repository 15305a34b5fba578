"""Boundary Protocols — contracts between the pure core and the storage shell.

Invariants:
    - Core NEVER imports from services/ or infrastructure/
    - All IO operations accessed through Protocol types

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; callers such as AutoSaver depend
      only on these shapes, so tests can hand in fakes
"""

from typing import Any, Protocol

from wmstore.core.domain_types import ProfileId


class ProfileLike(Protocol):
    """Structural contract for Profile rows handed to callers."""
    id: int
    name: str
    is_active: bool


class ProfileStore(Protocol):
    """Contract for profile lifecycle — implemented by ProfileManager."""
    async def create_profile(self, name: str) -> ProfileId: ...
    async def switch_profile(self, profile_id: ProfileId) -> None: ...
    async def rename_profile(self, profile_id: ProfileId, new_name: str) -> None: ...
    async def delete_profile(self, profile_id: ProfileId) -> None: ...
    async def get_active_profile(self) -> ProfileLike | None: ...
    async def list_profiles(self) -> list[ProfileLike]: ...
    async def initialize_profiles(self) -> ProfileLike: ...


class StateStore(Protocol):
    """Contract for profile-scoped entity persistence — implemented by EntityRepository."""
    async def save_state(
        self, state: dict, profile_id: ProfileId | None = None,
    ) -> ProfileId: ...
    async def load_state(self, profile_id: ProfileId | None = None) -> dict | None: ...
    async def save_result(
        self, mode: str, result: Any, profile_id: ProfileId | None = None,
    ) -> None: ...
    async def get_latest_result(
        self, mode: str, profile_id: ProfileId | None = None,
    ) -> Any | None: ...
    async def clear_profile_data(self, profile_id: ProfileId | None = None) -> ProfileId: ...
