"""Database package: SQLAlchemy models, engine and session dependency."""

from flightlog.db.engine import SessionLocal, get_engine, init_db
from flightlog.db.models import Base

__all__ = ["Base", "SessionLocal", "get_engine", "init_db"]
