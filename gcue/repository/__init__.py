"""
Repository package: query executors for each supported backend.
"""

from .base import QueryExecutor
from .factory import get_db_client
from .neo4j_client import Neo4jClient, Neo4jConfig
from .neptune_client import NeptuneClient

__all__ = [
    "QueryExecutor",
    "get_db_client",
    "Neo4jClient",
    "Neo4jConfig",
    "NeptuneClient",
]
