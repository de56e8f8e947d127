"""Entity Store backends and backend selection."""

from typing import Optional

from ecat_quiz import database
from ecat_quiz.config import Settings, get_settings
from ecat_quiz.stores.base import EntityStore
from ecat_quiz.stores.memory_store import MemoryEntityStore
from ecat_quiz.stores.sql_store import SqlEntityStore


def build_store(settings: Optional[Settings] = None) -> EntityStore:
    """Pick the backend named by ``STORE_BACKEND``.

    The SQL backend reuses the module-level engine when the configured URL
    matches it, so the app and scripts share one connection pool.
    """
    settings = settings or get_settings()
    if settings.STORE_BACKEND == "memory":
        return MemoryEntityStore()

    if str(database.engine.url) == settings.DATABASE_URL:
        return SqlEntityStore(database.engine)
    return SqlEntityStore(
        database.create_db_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    )


__all__ = ["EntityStore", "MemoryEntityStore", "SqlEntityStore", "build_store"]
