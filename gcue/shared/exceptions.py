"""
Custom exception hierarchy for gcue.

All errors inherit from GcueError so they can be caught
uniformly at the command-line entry point.
"""


class GcueError(Exception):
    """Base exception for all gcue errors."""

    def __init__(self, message: str, component: str = "gcue"):
        self.component = component
        self.message = message
        super().__init__(f"[{component}] {message}")


class ConfigurationError(GcueError):
    """Bad DB URI, missing mandatory setting, or conflicting options."""

    def __init__(self, message: str):
        super().__init__(message, component="config")


class DatabaseConnectionError(GcueError):
    """Backend unreachable or credentials rejected."""

    def __init__(self, message: str):
        super().__init__(message, component="connection")


class QueryExecutionError(GcueError):
    """Query rejected by the backend, or an unexpected response shape."""

    def __init__(self, message: str):
        super().__init__(message, component="query")


class ExportError(GcueError):
    """Results couldn't be encoded or written to disk."""

    def __init__(self, message: str):
        super().__init__(message, component="export")


class PagerError(GcueError):
    """The pager couldn't be spawned or exited unsuccessfully."""

    def __init__(self, message: str):
        super().__init__(message, component="pager")


def format_error_chain(exc: BaseException) -> str:
    """Render an exception followed by every explicitly chained cause."""
    lines = [str(exc)]
    causes = []
    cause = exc.__cause__
    while cause is not None:
        causes.append(cause)
        cause = cause.__cause__

    if causes:
        lines.append("")
        lines.append("Caused by:")
        for i, cause in enumerate(causes):
            text = str(cause) or type(cause).__name__
            lines.append(f"    {i}: {text}")

    return "\n".join(lines)
