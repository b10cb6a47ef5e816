"""
Tabular rendering of query results.

Columns come from the first row; every other row is projected onto them.
Missing keys render as empty cells and nulls as ``null``.
"""

import io
from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from gcue.domain.document import CanonicalValue
from gcue.service.output import column_names, compact_json

NO_RESULTS = "No results"


def cell_text(value: CanonicalValue) -> str:
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    return compact_json(value)


def table_cells(rows: Sequence[CanonicalValue]) -> tuple[list[str], list[list[str]]]:
    """Headers and cell text for a row sequence.

    Rows that are not objects are skipped; so is everything when the
    first row isn't one.
    """
    if not rows or not isinstance(rows[0], dict):
        return [], []

    headers = column_names(rows[0])
    body = [
        [cell_text(row[h]) if h in row else "" for h in headers]
        for row in rows
        if isinstance(row, dict)
    ]
    return headers, body


def build_table(rows: Sequence[CanonicalValue]) -> Table:
    headers, body = table_cells(rows)
    table = Table(box=box.SIMPLE_HEAD, show_edge=False, header_style="bold")
    for header in headers:
        table.add_column(Text(header), overflow="fold")
    for cells in body:
        # Text() keeps square brackets in values from being read as markup
        table.add_row(*(Text(cell) for cell in cells))
    return table


def get_results(rows: Sequence[CanonicalValue], width: int = 200) -> str:
    """Render rows as an aligned plain-text table."""
    if not rows:
        return NO_RESULTS

    buffer = io.StringIO()
    Console(file=buffer, width=width, color_system=None).print(build_table(rows))
    return buffer.getvalue().rstrip("\n")
