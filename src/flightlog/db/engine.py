"""Process-wide SQLAlchemy engine for the logbook database.

The API and the CLI share one engine per process. ``SessionLocal`` is
created unbound and is bound when the engine is first built.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from flightlog.db.models import Base

logger = logging.getLogger(__name__)

DB_FILENAME = "flightlog.db"
SQLITE_BUSY_TIMEOUT = 30  # seconds

_engine: Engine | None = None
SessionLocal: sessionmaker[Session] = sessionmaker()


def database_url() -> str:
    """URL of the logbook database for the current ENVIRONMENT.

    Production reads DATABASE_URL and refuses to start without it. Any
    other environment keeps a SQLite file under DATA_DIR (``data`` if unset).
    """
    if os.environ.get("ENVIRONMENT", "development") == "production":
        url = os.environ.get("DATABASE_URL")
        if not url:
            raise ValueError("DATABASE_URL must be set when ENVIRONMENT=production")
        return url

    data_dir = Path(os.environ.get("DATA_DIR", "data"))
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{data_dir / DB_FILENAME}"


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def _enable_sqlite_pragmas(engine: Engine) -> None:
    # Roster deletes rely on ON DELETE rules, which SQLite only honours per connection.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, _connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def get_engine(db_url: str | None = None) -> Engine:
    """Build the engine on first use and return the same one afterwards.

    ``db_url`` only matters on the first call; see ``database_url`` for the
    default.
    """
    global _engine
    if _engine is not None:
        return _engine

    url = db_url or database_url()
    sqlite = _is_sqlite(url)
    connect_args = (
        {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT} if sqlite else {}
    )

    engine = create_engine(url, connect_args=connect_args)
    if sqlite:
        _enable_sqlite_pragmas(engine)

    SessionLocal.configure(bind=engine)
    _engine = engine
    logger.info("Using database %s", make_url(url).render_as_string(hide_password=True))
    return engine


def reset_engine() -> None:
    """Dispose of the engine and unbind SessionLocal."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
    SessionLocal.configure(bind=None)


def init_db(engine: Engine | None = None) -> None:
    """Create any missing tables. Production schemas are managed by alembic."""
    Base.metadata.create_all(engine or get_engine())
    logger.info("Database tables created")
