"""
Paging exported results through an external command.
"""

import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from gcue.shared.config import GcueSettings
from gcue.shared.exceptions import ConfigurationError, PagerError

logger = logging.getLogger("gcue.service.pager")


@dataclass(frozen=True)
class Pager:
    """A pager command; the results file is appended as its last argument."""

    argv: tuple[str, ...]

    @classmethod
    def default(cls) -> "Pager":
        return cls(("more",) if sys.platform == "win32" else ("less",))

    @classmethod
    def custom(cls, command: str) -> "Pager":
        try:
            argv = tuple(shlex.split(command))
        except ValueError as exc:
            raise ConfigurationError(f"invalid pager command: {command!r}") from exc
        if not argv:
            raise ConfigurationError("pager command is empty")
        return cls(argv)

    def command(self, results_file: Path | str) -> list[str]:
        return [*self.argv, str(results_file)]


def get_pager(settings: GcueSettings) -> Pager:
    """Pager from GCUE_PAGER, or the platform default."""
    if settings.gcue_pager:
        return Pager.custom(settings.gcue_pager)
    return Pager.default()


def page_results(results_file: Path | str, pager: Pager) -> None:
    """Run the pager on a results file and wait for it to exit.

    Raises:
        PagerError: If the pager can't be started or exits non-zero.
    """
    cmd = pager.command(results_file)
    logger.debug("Paging results with %s", cmd)
    try:
        completed = subprocess.run(cmd, check=False)
    except OSError as exc:
        raise PagerError("couldn't execute pager command") from exc

    if completed.returncode != 0:
        raise PagerError(f"pager command failed with exit code {completed.returncode}")
