"""Root conftest — shared test configuration and store fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite store with the full schema
    - Settings are built explicitly (no .env file is read)
"""

import os

import pytest

os.environ.setdefault(
    "WMSTORE_DATABASE_URL", "sqlite+aiosqlite:///:memory:",
)

from wmstore.config import Settings  # noqa: E402
from wmstore.db.session import create_store_engine  # noqa: E402
from wmstore.infrastructure.database import DatabaseSessionManager  # noqa: E402
from wmstore.services.entity_repository import EntityRepository  # noqa: E402
from wmstore.services.persistence_api import PersistenceAPI  # noqa: E402
from wmstore.services.profile_manager import ProfileManager  # noqa: E402
from wmstore.services.save_transfer import SaveTransfer  # noqa: E402


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        max_profiles=3,
        app_version="9.9.9",
    )


@pytest.fixture
async def db_manager():
    engine = create_store_engine("sqlite+aiosqlite:///:memory:")
    manager = DatabaseSessionManager.from_engine(engine)
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
def profiles(db_manager, settings):
    return ProfileManager(db_manager, settings)


@pytest.fixture
def repo(db_manager, settings):
    return EntityRepository(db_manager, settings)


@pytest.fixture
def transfer(db_manager, settings):
    return SaveTransfer(db_manager, settings)


@pytest.fixture
def api(db_manager, settings):
    return PersistenceAPI(db_manager, settings)


@pytest.fixture
async def active_profile(profiles):
    """One profile, active, freshly initialized."""
    return await profiles.create_profile("Main")
