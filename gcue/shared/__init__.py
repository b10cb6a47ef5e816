"""
Shared package: configuration, errors, and logging.
"""

from .config import GcueSettings, require
from .exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    ExportError,
    GcueError,
    PagerError,
    QueryExecutionError,
)

__all__ = [
    "GcueSettings",
    "require",
    "GcueError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "QueryExecutionError",
    "ExportError",
    "PagerError",
]
