"""
gcue configuration.

Uses Pydantic Settings for environment-based configuration. Every field
maps to the environment variable of the same name in upper case
(DB_URI, NEO4J_USER, GCUE_PAGER, ...), optionally read from a .env file.
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings

from gcue.shared.exceptions import ConfigurationError

APP_NAME = "gcue"


class GcueSettings(BaseSettings):
    """Settings read from the environment at startup."""

    # Backend selection; the scheme decides between Neo4j and Neptune
    db_uri: str | None = None

    # Neo4j (bolt://) credentials
    neo4j_user: str | None = None
    neo4j_password: str | None = None
    neo4j_db: str | None = None

    # Neptune (http[s]://); falls back to botocore's own region resolution
    aws_region: str | None = None

    # Pager command used with --page-results
    gcue_pager: str | None = None

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def require(settings: GcueSettings, field: str) -> str:
    """Return a mandatory setting or raise naming its environment variable."""
    value = getattr(settings, field)
    if not value:
        raise ConfigurationError(f"{field.upper()} is not set")
    return value


def data_dir() -> Path:
    """Directory holding gcue's history and log files."""
    base = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / APP_NAME


def history_file_path() -> Path:
    return data_dir() / "history.txt"


def log_file_path() -> Path:
    return data_dir() / f"{APP_NAME}.log"
