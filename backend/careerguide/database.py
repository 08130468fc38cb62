"""Database engine and helpers.

This module builds the single SQLModel/SQLAlchemy engine used by the
whole process. `DATABASE_URL` selects the store; when it is unset a
local SQLite file `app.db` next to the `backend/` sources is used.
SQLite connections get foreign key enforcement switched on so the
store-level constraints back up the service pre-checks.
"""

from pathlib import Path

from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import settings

BASE = Path(__file__).resolve().parent.parent
DB_URL = settings.DATABASE_URL or f"sqlite:///{BASE / 'app.db'}"


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every checkout sees an empty database
        options["poolclass"] = StaticPool
    return options


engine = create_engine(DB_URL, echo=settings.SQL_ECHO, **_engine_options(DB_URL))

if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    Intended for local development and tests; production deployments
    should rely on a proper migration tool (alembic) instead.
    """
    from . import models  # noqa: F401  registers the table classes

    SQLModel.metadata.create_all(engine)


def drop_db_and_tables():
    """Drop every table known to the SQLModel metadata."""
    from . import models  # noqa: F401

    SQLModel.metadata.drop_all(engine)


def dispose_engine():
    """Release pooled connections; called on application shutdown."""
    engine.dispose()


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
