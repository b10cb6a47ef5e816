"""
One-off query execution and benchmarking.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console
from rich.text import Text

from gcue.domain.results import QueryResults
from gcue.repository.base import QueryExecutor
from gcue.shared.exceptions import GcueError, QueryExecutionError

logger = logging.getLogger("gcue.cmds.query")


@dataclass
class BenchmarkStats:
    """Latency statistics over the measured runs, in whole milliseconds."""

    min_ms: int
    max_ms: int
    mean_ms: int
    runs_ms: list[int]


async def execute_query(db_client: QueryExecutor, query: str) -> QueryResults:
    return await db_client.execute(query)


async def _timed_run(db_client: QueryExecutor, query: str, clock: Callable[[], float]) -> int:
    start = clock()
    await db_client.execute(query)
    return int((clock() - start) * 1000)


def _print_run(console: Console, index: int, elapsed_ms: int) -> None:
    console.print(Text(f"run {index:03}:      ") + Text(f"{elapsed_ms}ms", style="cyan"))


async def benchmark_query(
    db_client: QueryExecutor,
    query: str,
    num_runs: int,
    num_warmup_runs: int = 0,
    console: Console | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> BenchmarkStats:
    """Run a query repeatedly and report per-run and aggregate latency.

    Warmup runs are timed and printed but left out of the statistics.

    Args:
        db_client: Executor to benchmark against.
        query: Query to run.
        num_runs: Measured runs; at least 1.
        num_warmup_runs: Runs to discard before measuring.
        console: Where to print progress; stdout when omitted.
        clock: Seconds-resolution monotonic clock.

    Returns:
        Min, max and mean latency of the measured runs.

    Raises:
        QueryExecutionError: If any run fails; names the failing run.
    """
    console = console or Console(highlight=False)

    if num_warmup_runs > 0:
        console.print(Text(f"Warming up ({num_warmup_runs} runs) ...", style="bold yellow"))
    for i in range(1, num_warmup_runs + 1):
        try:
            elapsed = await _timed_run(db_client, query, clock)
        except GcueError as exc:
            raise QueryExecutionError(f"couldn't get results for warmup run #{i}") from exc
        _print_run(console, i, elapsed)

    if num_warmup_runs > 0:
        console.print()

    console.print(Text(f"Benchmarking ({num_runs} runs) ...", style="bold yellow"))

    times: list[int] = []
    for i in range(1, num_runs + 1):
        try:
            elapsed = await _timed_run(db_client, query, clock)
        except GcueError as exc:
            raise QueryExecutionError(f"couldn't execute query for benchmark run #{i}") from exc
        _print_run(console, i, elapsed)
        times.append(elapsed)

    stats = BenchmarkStats(
        min_ms=min(times),
        max_ms=max(times),
        mean_ms=sum(times) // len(times),
        runs_ms=times,
    )
    logger.info("Benchmark finished: %s", stats)

    console.print()
    console.print(Text("Statistics:", style="bold yellow"))
    for label, value in (("min", stats.min_ms), ("max", stats.max_ms), ("mean", stats.mean_ms)):
        console.print(Text(f"{label + ':':<14}") + Text(f"{value}ms", style="cyan"))

    return stats
