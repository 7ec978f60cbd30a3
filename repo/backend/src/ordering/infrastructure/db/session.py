from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _connect_args(database_url: str, timeout_seconds: float) -> dict[str, Any]:
    backend_name = make_url(database_url).get_backend_name()
    if backend_name == "sqlite":
        return {"timeout": timeout_seconds}
    if backend_name == "postgresql":
        return {"connect_timeout": max(1, int(timeout_seconds))}
    return {}


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores FK constraints and ON DELETE CASCADE unless asked per connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()


@lru_cache(maxsize=8)
def _build_engine(database_url: str, timeout_seconds: float) -> Engine:
    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=_connect_args(database_url, timeout_seconds),
    )
    enable_sqlite_foreign_keys(engine)
    return engine


def get_engine(database_url: str, timeout_seconds: float = 2.0) -> Engine:
    return _build_engine(database_url, timeout_seconds)


def ping_database(engine: Engine) -> bool:
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


@contextmanager
def transaction_scope(engine: Engine) -> Iterator[Session]:
    """Yield a session owning one connection inside one transaction.

    Commits when the block exits normally. On any exception the transaction
    is rolled back and the exception re-raised. The session is closed on
    every path; rollback or close failures are logged and never replace the
    original exception.
    """
    session = Session(engine)
    try:
        session.begin()
        yield session
        session.commit()
    except BaseException:
        try:
            session.rollback()
        except Exception:
            logger.exception("transaction_rollback_failed")
        raise
    finally:
        try:
            session.close()
        except Exception:
            logger.exception("session_release_failed")
