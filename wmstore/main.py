"""Store Entry Point — one storage handle per process with an explicit lifecycle.

Invariants:
    - open_store builds exactly one DatabaseSessionManager (via init_db) and one PersistenceAPI
    - After open_store returns, the schema exists and exactly one profile is active
    - close_store disposes the engine; the handle is unusable afterwards

Design Decisions:
    - store_lifespan mirrors an application lifespan: startup, yield, shutdown
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from wmstore.config import Settings, get_settings
from wmstore.infrastructure.database import close_db, init_db
from wmstore.infrastructure.observability import setup_logging
from wmstore.services.persistence_api import PersistenceAPI

logger = logging.getLogger(__name__)


async def open_store(
    settings: Settings | None = None, configure_logging: bool = True,
) -> PersistenceAPI:
    """Startup: logging, engine, schema, first-run profile bootstrap."""
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)
    manager = init_db(settings.database_url, echo=settings.database_echo)
    await manager.create_schema()
    api = PersistenceAPI(manager, settings)
    await api.profiles.initialize_profiles()
    logger.info("Store opened")
    return api


async def close_store() -> None:
    await close_db()
    logger.info("Store closed")


@asynccontextmanager
async def store_lifespan(
    settings: Settings | None = None, configure_logging: bool = True,
) -> AsyncGenerator[PersistenceAPI, None]:
    api = await open_store(settings, configure_logging)
    try:
        yield api
    finally:
        await close_store()
