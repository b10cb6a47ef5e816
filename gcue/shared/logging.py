"""
Logging setup shared by the console and one-off query paths.

The console owns stdout, so records are written to a log file
under gcue's data directory when one is given.
"""

import logging
from pathlib import Path


def setup_logging(name: str, level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """
    Configure logging for the process.

    Args:
        name: Name of the returned logger.
        level: Log level string (e.g. 'INFO', 'DEBUG').
        log_file: Optional file to write records to; stderr when omitted.

    Returns:
        Configured logger instance.
    """
    kwargs = {}
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        kwargs["filename"] = str(log_file)
        kwargs["encoding"] = "utf-8"

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
        **kwargs,
    )
    return logging.getLogger(name)
