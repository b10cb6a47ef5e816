"""
Domain package: canonical values, query results, and export formats.
"""

from .document import CanonicalValue, decode_document, normalize
from .output import OutputFormat
from .results import EmptyResults, NonEmptyResults, QueryResults, query_results_from

__all__ = [
    "CanonicalValue",
    "decode_document",
    "normalize",
    "OutputFormat",
    "EmptyResults",
    "NonEmptyResults",
    "QueryResults",
    "query_results_from",
]
