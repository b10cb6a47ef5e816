"""
gcue command line.

    gcue console                  start the interactive console
    gcue query "MATCH (n) ..."    run a one-off query ("-" reads stdin)
"""

import asyncio
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from gcue import __version__
from gcue.domain.output import OutputFormat
from gcue.run import run_console, run_query
from gcue.shared.config import GcueSettings, log_file_path
from gcue.shared.exceptions import GcueError, format_error_chain
from gcue.shared.logging import setup_logging

DEFAULT_RESULTS_DIRECTORY = ".gcue"


def _results_options(func):
    func = click.option(
        "--results-format", "-f",
        type=click.Choice([fmt.value for fmt in OutputFormat]),
        default=OutputFormat.CSV.value,
        show_default=True,
        help="Format for results written to disk",
    )(func)
    func = click.option(
        "--results-directory", "-d",
        type=click.Path(file_okay=False, path_type=Path),
        default=DEFAULT_RESULTS_DIRECTORY,
        show_default=True,
        help="Directory to write results in",
    )(func)
    func = click.option("--write-results", "-w", is_flag=True, help="Write results to disk")(func)
    func = click.option("--page-results", "-p", is_flag=True, help="Display results via a pager")(func)
    return func


def _debug_info(command: str, params: dict) -> str:
    lines = ["DEBUG INFO", f"command:    {command}"]
    for name, value in params.items():
        lines.append(f"{name + ':':<{24}}{value}")
    return "\n".join(lines)


def _run(coro) -> None:
    """Run a flow, turning gcue errors into a message and exit status 1."""
    try:
        asyncio.run(coro)
    except GcueError as exc:
        click.echo(f"Error: {format_error_chain(exc)}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="gcue")
@click.option("--debug", is_flag=True, help="Output debug information without doing anything")
@click.pass_context
def cli(ctx, debug):
    """gcue lets you query Neo4j/AWS Neptune databases via an interactive console."""
    load_dotenv()
    settings = GcueSettings()
    setup_logging("gcue", settings.log_level, log_file_path())
    ctx.obj = {"debug": debug, "settings": settings}


@cli.command("console")
@_results_options
@click.pass_context
def console_command(ctx, page_results, write_results, results_directory, results_format):
    """Open gcue's console."""
    if ctx.obj["debug"]:
        click.echo(_debug_info("console", ctx.params))
        return

    _run(run_console(
        ctx.obj["settings"],
        page_results=page_results,
        write_results=write_results,
        results_directory=results_directory,
        results_format=OutputFormat(results_format),
    ))


@cli.command("query")
@click.argument("query")
@_results_options
@click.option("--benchmark", "-b", is_flag=True, help="Whether to benchmark the query")
@click.option(
    "--bench-num-runs", "-n",
    type=click.IntRange(min=1), default=5, show_default=True,
    help="Number of benchmark runs",
)
@click.option(
    "--bench-num-warmup-runs", "-W",
    type=click.IntRange(min=0), default=3, show_default=True,
    help="Number of benchmark warmup runs",
)
@click.option("--print-query", "-P", is_flag=True, help="Print the query before running it")
@click.pass_context
def query_command(
    ctx,
    query,
    page_results,
    write_results,
    results_directory,
    results_format,
    benchmark,
    bench_num_runs,
    bench_num_warmup_runs,
    print_query,
):
    """Execute a one-off query. Pass "-" to read the query from stdin.

    Example:
        gcue query 'MATCH (n: Node) RETURN n.id, n.name LIMIT 5'
    """
    if ctx.obj["debug"]:
        click.echo(_debug_info("query", ctx.params))
        return

    _run(run_query(
        ctx.obj["settings"],
        query,
        page_results=page_results,
        benchmark=benchmark,
        bench_num_runs=bench_num_runs,
        bench_num_warmup_runs=bench_num_warmup_runs,
        print_query=print_query,
        write_results=write_results,
        results_directory=results_directory,
        results_format=OutputFormat(results_format),
    ))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
