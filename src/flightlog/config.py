"""Reporting configuration loading from YAML and environment."""

from __future__ import annotations

import logging
import os
from datetime import timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator

from flightlog.reporting.dashboard import RECENT_FLIGHTS_LIMIT

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"
CONFIG_FILENAME = "flightlog.yaml"


def resolve_timezone(name: str) -> tzinfo:
    """'UTC' or an IANA name ('Europe/London') -> tzinfo. Raises ValueError if unknown."""
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {name}") from None


class ReportSettings(BaseModel):
    """Settings for dashboard and record views."""

    timezone: str = "UTC"
    recent_limit: int = Field(default=RECENT_FLIGHTS_LIMIT, ge=1)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        resolve_timezone(v)
        return v

    @property
    def tzinfo(self) -> tzinfo:
        return resolve_timezone(self.timezone)


def load_settings(config_dir: Path | None = None) -> ReportSettings:
    """Load settings from flightlog.yaml, then apply environment overrides.

    The file is optional; missing keys fall back to defaults.
    FLIGHTLOG_TIMEZONE overrides ``reporting.timezone``.

    Args:
        config_dir: Override for config directory (testing).
    """
    config_dir = config_dir or CONFIG_DIR
    config_file = config_dir / CONFIG_FILENAME

    data: dict = {}
    if config_file.exists():
        with open(config_file) as f:
            data = (yaml.safe_load(f) or {}).get("reporting", {}) or {}
    else:
        logger.debug("No config file at %s, using defaults", config_file)

    env_tz = os.environ.get("FLIGHTLOG_TIMEZONE")
    if env_tz:
        data["timezone"] = env_tz

    return ReportSettings(**data)
