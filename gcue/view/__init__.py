"""
View package: interactive console and result tables.
"""

from .console import Console, SessionConfig
from .history import HistoryLog
from .results import get_results

__all__ = [
    "Console",
    "SessionConfig",
    "HistoryLog",
    "get_results",
]
