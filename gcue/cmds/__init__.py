"""
Commands package: one-off query execution and benchmarking.
"""

from .query import BenchmarkStats, benchmark_query, execute_query

__all__ = [
    "BenchmarkStats",
    "benchmark_query",
    "execute_query",
]
