"""FastAPI dependencies for reporting settings and the reference clock."""

from __future__ import annotations

from datetime import datetime, timezone

from flightlog.config import ReportSettings, load_settings


def get_settings() -> ReportSettings:
    """Reporting settings from config/flightlog.yaml and the environment."""
    return load_settings()


def get_now() -> datetime:
    """Reference instant for "today" and "this month". Overridden in tests."""
    return datetime.now(timezone.utc)
