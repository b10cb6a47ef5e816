"""
Top-level flows behind the ``console`` and ``query`` commands.
"""

import logging
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import TextIO

from rich.console import Console as RichConsole
from rich.text import Text

from gcue.cmds.query import benchmark_query, execute_query
from gcue.domain.output import OutputFormat
from gcue.domain.results import EmptyResults
from gcue.repository.factory import get_db_client
from gcue.service import output as output_service
from gcue.service import pager as pager_service
from gcue.shared.config import GcueSettings, history_file_path
from gcue.shared.exceptions import ConfigurationError
from gcue.view.console import Console, SessionConfig
from gcue.view.history import HistoryLog
from gcue.view.results import NO_RESULTS, get_results

logger = logging.getLogger("gcue.run")


def read_query(query: str, stdin: TextIO = sys.stdin) -> str:
    """The query itself, or stdin's trimmed contents when ``query`` is ``-``."""
    if query != "-":
        return query
    try:
        return stdin.read().strip()
    except OSError as exc:
        raise ConfigurationError("couldn't read query from stdin") from exc


async def run_console(
    settings: GcueSettings,
    page_results: bool = False,
    write_results: bool = False,
    results_directory: Path | None = None,
    results_format: OutputFormat = OutputFormat.CSV,
) -> None:
    pager = pager_service.get_pager(settings) if page_results else None
    config = SessionConfig(output_format=results_format, write=write_results)
    if results_directory is not None:
        config.output_path = results_directory

    db_client = await get_db_client(settings)
    async with db_client:
        console = Console(db_client, HistoryLog(history_file_path()), config, pager)
        await console.run_loop()


async def run_query(
    settings: GcueSettings,
    query: str,
    page_results: bool = False,
    benchmark: bool = False,
    bench_num_runs: int = 5,
    bench_num_warmup_runs: int = 3,
    print_query: bool = False,
    write_results: bool = False,
    results_directory: Path = Path(".gcue"),
    results_format: OutputFormat = OutputFormat.CSV,
    stdin: TextIO = sys.stdin,
    output: RichConsole | None = None,
) -> None:
    """Run a single query (or benchmark it) and print, write or page the results.

    Raises:
        ConfigurationError: For conflicting options or a bad configuration.
        DatabaseConnectionError: If the backend can't be reached.
        QueryExecutionError: If the query fails.
        ExportError: If results can't be written.
        PagerError: If the pager fails.
    """
    if benchmark and write_results:
        raise ConfigurationError("cannot benchmark and write results at the same time")

    out = output or RichConsole(highlight=False)
    pager = pager_service.get_pager(settings) if page_results else None

    db_client = await get_db_client(settings)
    async with db_client:
        query = read_query(query, stdin)
        logger.debug("Running one-off query (benchmark=%s)", benchmark)

        if print_query:
            out.print(Text(f"---\n{query}\n---\n"))

        if benchmark:
            await benchmark_query(db_client, query, bench_num_runs, bench_num_warmup_runs, console=out)
            return

        results = await execute_query(db_client, query)

    if isinstance(results, EmptyResults):
        out.print(NO_RESULTS)
        return

    if write_results:
        results_file = output_service.write_results(
            results, results_directory, results_format, datetime.now(timezone.utc)
        )
        out.print(Text(f"Wrote results to {results_file}"))
        if pager is not None:
            pager_service.page_results(results_file, pager)
    elif pager is not None:
        with tempfile.TemporaryDirectory(prefix="gcue-") as tmp:
            results_file = output_service.write_results(
                results, Path(tmp), results_format, datetime.now(timezone.utc)
            )
            pager_service.page_results(results_file, pager)
    else:
        out.print(Text(get_results(results.list())))
