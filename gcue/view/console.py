"""
Interactive console.

Reads one line at a time, handles built-in commands that adjust the
session's export settings, and sends everything else to the query
executor. Session settings live on the Console instance and are gone
when the loop ends; only the query history is persisted.
"""

import glob
import logging
import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console as RichConsole
from rich.text import Text

from gcue.domain.output import OutputFormat
from gcue.domain.results import EmptyResults, NonEmptyResults, QueryResults
from gcue.repository.base import QueryExecutor
from gcue.service.output import write_results
from gcue.service.pager import Pager, page_results
from gcue.shared.exceptions import ExportError, PagerError, format_error_chain
from gcue.view.history import HistoryLog, readline
from gcue.view.results import build_table

logger = logging.getLogger("gcue.view.console")

PROMPT = ">> "
DEFAULT_OUTPUT_PATH = ".gcue"
EXIT_COMMANDS = frozenset({"bye", "exit", "quit", ":q"})
HELP_COMMANDS = frozenset({"help", ":h"})

BANNER = r"""
   __ _  ___ _   _  ___
  / _` |/ __| | | |/ _ \
 | (_| | (__| |_| |  __/
  \__, |\___|\__,_|\___|
  |___/
"""

COMMANDS = """ commands
   help / :h                      show help
   clear                          clear screen
   format <csv/json>              set format for results written to disk
   output <PATH>                  set directory for results written to disk
   output reset                   reset output directory to the default
   write on/off                   toggle writing results to disk
   @<PATH>                        run the query stored in a file
   bye / exit / quit / :q         quit"""

KEYMAPS = """ keymaps
   <up> / <down>                  scroll through query history
   <tab>                          complete file path after @
   ctrl+d                         quit"""


@dataclass
class SessionConfig:
    """Export settings for one console session."""

    output_format: OutputFormat = OutputFormat.CSV
    output_path: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_PATH))
    write: bool = False


def config_text(config: SessionConfig) -> str:
    return (
        " config\n"
        f"   output format                  {config.output_format}\n"
        f"   output path                    {config.output_path}\n"
        f"   write output                   {'ON' if config.write else 'OFF'}"
    )


class Console:
    """
    Read-eval-print loop over a query executor.

    Built-in commands mutate ``self.config``; any other input is run as
    a query. A failed query ends the session with the raised error.
    """

    def __init__(
        self,
        db_client: QueryExecutor,
        history: HistoryLog,
        config: SessionConfig | None = None,
        pager: Pager | None = None,
        output: RichConsole | None = None,
        read_line: Callable[[str], str] = input,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.db_client = db_client
        self.history = history
        self.config = config or SessionConfig()
        self.pager = pager
        self._out = output or RichConsole(highlight=False)
        self._read_line = read_line
        self._now = now

    # ─── Loop ───────────────────────────────────────────────

    async def run_loop(self) -> None:
        """Run until an exit command, EOF, or a failed query.

        Raises:
            QueryExecutionError: If a query fails; the session ends.
        """
        self.print_banner()
        self.print_help()

        self.history.load()
        self._install_completer()

        try:
            while True:
                try:
                    line = self._read_line(PROMPT)
                except (EOFError, KeyboardInterrupt):
                    self._out.print()
                    break

                if not await self.handle_line(line):
                    break
        finally:
            self.history.save()

    async def handle_line(self, line: str) -> bool:
        """Dispatch one input line. Returns False when the session should end."""
        text = line.strip()

        if not text:
            return True
        if text in EXIT_COMMANDS:
            return False
        if text == "clear":
            self._clear_screen()
            return True
        if text in HELP_COMMANDS:
            self.print_banner()
            self.print_help()
            return True

        command, _, arg = text.partition(" ")
        arg = arg.strip()
        if command == "format":
            self._set_format(arg)
        elif command == "output":
            self._set_output(arg)
        elif command == "write":
            self._set_write(arg)
        else:
            await self._run_query(text)
        return True

    # ─── Built-in commands ──────────────────────────────────

    def _set_format(self, arg: str) -> None:
        if not arg:
            self.print_error("Usage: format <csv/json>")
            return
        try:
            self.config.output_format = OutputFormat.parse(arg)
        except ValueError as exc:
            self.print_error(str(exc))
            return
        self.print_info(f"output format set to: {self.config.output_format}")

    def _set_output(self, arg: str) -> None:
        if not arg:
            self.print_error("Usage: output <PATH>")
            return
        if arg == "reset":
            self.config.output_path = Path(DEFAULT_OUTPUT_PATH)
            self.print_info(f"output path changed to gcue's default: {DEFAULT_OUTPUT_PATH}")
            return
        self.config.output_path = Path(arg).expanduser()
        self.print_info(f"output path changed to: {arg}")

    def _set_write(self, arg: str) -> None:
        if arg == "on":
            self.config.write = True
            self.print_info("writing output turned ON")
        elif arg == "off":
            self.config.write = False
            self.print_info("writing output turned OFF")
        else:
            self.print_error("Usage: write on/off")

    def _clear_screen(self) -> None:
        try:
            self._out.clear()
        except OSError:
            self.print_error("Error: couldn't clear screen")

    # ─── Queries ────────────────────────────────────────────

    async def _run_query(self, text: str) -> None:
        if text.startswith("@"):
            query = self._read_query_file(text[1:].strip())
            if query is None:
                return
        else:
            query = text

        try:
            self.history.append(text)
        except Exception as exc:
            logger.warning("Couldn't add query to history: %s", exc)
            self.print_error(f"Error: {exc}")

        results = await self.db_client.execute(query)
        self._show_results(results)

    def _read_query_file(self, path: str) -> str | None:
        if not path:
            self.print_error("Usage: @<PATH>")
            return None
        try:
            query = Path(path).expanduser().read_text(encoding="utf-8").strip()
        except OSError as exc:
            self.print_error(f"Error: couldn't read query from {path}: {exc}")
            return None
        if not query:
            self.print_error(f"Error: {path} is empty")
            return None
        return query

    def _show_results(self, results: QueryResults) -> None:
        if isinstance(results, EmptyResults):
            self._out.print()
            self._out.print(Text(" no results", style="blue"))
            self._out.print()
            return

        results_file = None
        if self.config.write:
            results_file = self._write(results, self.config.output_path)
            if results_file is not None:
                self.print_info(f"wrote results to {results_file}")

        if self.pager is not None:
            self._page(results, results_file)
            return

        self._out.print()
        self._out.print(build_table(results.list()))
        self._out.print()

    def _write(self, results: NonEmptyResults, directory: Path) -> Path | None:
        try:
            return write_results(results, directory, self.config.output_format, self._now())
        except ExportError as exc:
            self.print_error(f"Error: {format_error_chain(exc)}")
            return None

    def _page(self, results: NonEmptyResults, results_file: Path | None) -> None:
        try:
            if results_file is not None:
                page_results(results_file, self.pager)
                return
            with tempfile.TemporaryDirectory(prefix="gcue-") as tmp:
                results_file = self._write(results, Path(tmp))
                if results_file is not None:
                    page_results(results_file, self.pager)
        except PagerError as exc:
            self.print_error(f"Error: {format_error_chain(exc)}")

    # ─── Output ─────────────────────────────────────────────

    def print_error(self, contents: str) -> None:
        self._out.print(Text(contents, style="red"))

    def print_info(self, contents: str) -> None:
        self._out.print(Text(contents, style="blue"))

    def print_banner(self) -> None:
        self._out.print(Text(BANNER, style="blue"))

    def print_help(self) -> None:
        self._out.print(Text(" connected to: ") + Text(self.db_client.db_uri, style="cyan"))
        self._out.print()
        self._out.print(Text(config_text(self.config), style="blue"))
        self._out.print()
        self._out.print(Text(COMMANDS, style="yellow"))
        self._out.print(Text(KEYMAPS, style="green"))
        self._out.print()

    # ─── Line editing ───────────────────────────────────────

    def _install_completer(self) -> None:
        if readline is None or self._read_line is not input:
            return
        readline.set_completer_delims(" \t\n")
        readline.set_completer(complete_query_file)
        readline.parse_and_bind("tab: complete")


def complete_query_file(text: str, state: int) -> str | None:
    """readline completer for file paths typed after ``@``."""
    if not text.startswith("@"):
        return None
    prefix = os.path.expanduser(text[1:])
    matches = sorted(glob.glob(prefix + "*"))
    candidates = [
        "@" + (match + os.sep if os.path.isdir(match) else match) for match in matches
    ]
    return candidates[state] if state < len(candidates) else None
