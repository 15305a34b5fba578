"""Store Lifecycle — open_store/close_store, health check, settings, logging."""

import json
import logging

import pytest
from pydantic import ValidationError

from wmstore.config import Settings
from wmstore.infrastructure.database import get_db_manager
from wmstore.infrastructure.observability import JSONFormatter
from wmstore.main import close_store, open_store, store_lifespan


def _memory_settings(**overrides):
    return Settings(
        _env_file=None, database_url="sqlite+aiosqlite:///:memory:", **overrides,
    )


async def test_open_store_bootstraps_default_profile():
    api = await open_store(_memory_settings(), configure_logging=False)
    try:
        profiles = (await api.list_profiles()).value
        assert [(p.name, p.is_active) for p in profiles] == [("Default", True)]
        assert await get_db_manager().health_check()
    finally:
        await close_store()
    with pytest.raises(RuntimeError):
        get_db_manager()


async def test_store_lifespan_closes_handle():
    async with store_lifespan(_memory_settings(), configure_logging=False) as api:
        assert (await api.get_active_profile()).ok
    with pytest.raises(RuntimeError):
        get_db_manager()


def test_plain_sqlite_url_gets_async_driver():
    settings = Settings(_env_file=None, database_url="sqlite:///store.db")
    assert settings.database_url == "sqlite+aiosqlite:///store.db"


def test_max_profiles_must_be_positive():
    with pytest.raises(ValidationError):
        _memory_settings(max_profiles=0)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("WMSTORE_MAX_PROFILES", "8")
    monkeypatch.setenv("WMSTORE_STRICT_INVARIANTS", "false")
    settings = Settings(_env_file=None)
    assert settings.max_profiles == 8
    assert settings.strict_invariants is False


def test_json_formatter_includes_extras():
    record = logging.LogRecord(
        "wmstore.test", logging.ERROR, __file__, 1, "save failed", None, None,
    )
    record.profile_id = 3
    record.error_code = "STORAGE_FAILURE"
    payload = json.loads(JSONFormatter().format(record))
    assert payload["level"] == "ERROR"
    assert payload["message"] == "save failed"
    assert payload["profile_id"] == 3
    assert payload["error_code"] == "STORAGE_FAILURE"
    assert "operation" not in payload
