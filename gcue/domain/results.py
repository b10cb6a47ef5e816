"""
Query results with the empty / non-empty distinction made explicit.

Formatting and export code only ever receives ``NonEmptyResults``, so it
can rely on ``first()`` without re-checking for zero rows.
"""

from collections.abc import Iterable, Iterator, Sequence
from typing import Union

from gcue.domain.document import CanonicalValue


class NonEmptyResults:
    """An immutable sequence of canonical rows holding at least one row."""

    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[CanonicalValue]):
        rows = tuple(rows)
        if not rows:
            raise ValueError("list is empty")
        self._rows = rows

    def list(self) -> Sequence[CanonicalValue]:
        return self._rows

    def first(self) -> CanonicalValue:
        return self._rows[0]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[CanonicalValue]:
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NonEmptyResults):
            return NotImplemented
        return self._rows == other._rows

    def __repr__(self) -> str:
        return f"NonEmptyResults({len(self._rows)} rows)"


class EmptyResults:
    """Marker for a query that returned no rows."""

    __slots__ = ()

    def __len__(self) -> int:
        return 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EmptyResults)

    def __hash__(self) -> int:
        return hash(EmptyResults)

    def __repr__(self) -> str:
        return "EmptyResults()"


QueryResults = Union[EmptyResults, NonEmptyResults]


def query_results_from(rows: Iterable[CanonicalValue]) -> QueryResults:
    """Fold a row sequence into the matching results variant."""
    rows = list(rows)
    if not rows:
        return EmptyResults()
    return NonEmptyResults(rows)
