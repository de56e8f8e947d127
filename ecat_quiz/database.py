"""Database engine configuration and schema creation."""

import logging
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from ecat_quiz import models  # noqa: F401  (registers the tables on the metadata)
from ecat_quiz.config import get_settings
from ecat_quiz.errors import InitializationError

logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with foreign-key enforcement off per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Build an engine for ``url``.

    SQLite engines get ``check_same_thread=False`` and foreign keys turned on.
    In-memory SQLite uses a StaticPool so every connection shares one database.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if _is_memory_url(url):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, echo=echo, **kwargs)
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def initialize(db_engine: Optional[Engine] = None) -> None:
    """Create users, quizzes, questions, answers and results if absent.

    Safe to call repeatedly. Must run before any other operation.

    Raises:
        InitializationError: the engine could not be opened or a DDL
            statement was rejected.
    """
    target = db_engine if db_engine is not None else engine
    try:
        SQLModel.metadata.create_all(target)
    except SQLAlchemyError as exc:
        logger.error("Schema initialization failed for %s: %s", target.url, exc)
        raise InitializationError(
            f"Could not initialize database at {target.url}"
        ) from exc
    logger.info("Database schema ready at %s", target.url)


_settings = get_settings()
engine = create_db_engine(_settings.DATABASE_URL, echo=_settings.SQL_ECHO)
