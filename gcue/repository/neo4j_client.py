"""
Neo4j Client

Executes queries against a self-hosted Neo4j database over Bolt using the
official async driver. The driver is created and its connectivity verified
when the client is built, so a bad address or rejected credentials fail
before the first query is read.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase
from neo4j.exceptions import DriverError, Neo4jError
from neo4j.graph import Node, Path, Relationship
from neo4j.spatial import Point

from gcue.domain.document import CanonicalValue
from gcue.domain.results import QueryResults, query_results_from
from gcue.repository.base import QueryExecutor
from gcue.shared.exceptions import DatabaseConnectionError, QueryExecutionError

logger = logging.getLogger("gcue.repository.neo4j")


@dataclass
class Neo4jConfig:
    """Connection settings for a Bolt endpoint."""

    db_uri: str
    user: str
    password: str
    database_name: str


def to_canonical(value: Any) -> CanonicalValue:
    """Convert a value yielded by the Neo4j driver into a canonical value.

    Nodes and relationships become their property maps, paths become the
    alternating list of node and relationship maps, temporal values
    become ISO-8601 strings and points become their coordinate list.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (Node, Relationship)):
        return {key: to_canonical(item) for key, item in value.items()}
    if isinstance(value, Path):
        # relationships may point against the walk; follow path.nodes
        entities: list[CanonicalValue] = [to_canonical(value.nodes[0])]
        for relationship, node in zip(value.relationships, value.nodes[1:]):
            entities.append(to_canonical(relationship))
            entities.append(to_canonical(node))
        return entities
    if isinstance(value, Point):
        return [to_canonical(coordinate) for coordinate in value]
    if isinstance(value, dict):
        return {str(key): to_canonical(item) for key, item in value.items()}
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, (list, tuple)):
        return [to_canonical(item) for item in value]
    if hasattr(value, "iso_format"):
        # neo4j.time Date, Time, DateTime and Duration
        return value.iso_format()
    return str(value)


class Neo4jClient(QueryExecutor):
    """
    Query executor backed by a single async Neo4j driver.

    Usage
    -----
    client = await Neo4jClient.connect(config)
    results = await client.execute("MATCH (n) RETURN n LIMIT 5")
    await client.close()
    """

    def __init__(self, driver: AsyncDriver, config: Neo4jConfig):
        self._driver = driver
        self._config = config

    # ─── Lifecycle ──────────────────────────────────────────

    @classmethod
    async def connect(cls, config: Neo4jConfig) -> "Neo4jClient":
        """Create the async driver, verify connectivity and open the database.

        Raises:
            DatabaseConnectionError: If the driver can't be created, the
                database is unreachable, the credentials are rejected or the
                named database doesn't exist.
        """
        try:
            driver = AsyncGraphDatabase.driver(
                config.db_uri, auth=(config.user, config.password)
            )
        except (DriverError, ValueError) as exc:
            raise DatabaseConnectionError(
                f"couldn't create Neo4j driver for {config.db_uri}"
            ) from exc

        try:
            await driver.verify_connectivity()
        except (Neo4jError, DriverError, OSError) as exc:
            logger.error("Failed to connect to Neo4j at %s", config.db_uri)
            await driver.close()
            raise DatabaseConnectionError(
                f"couldn't connect to Neo4j at {config.db_uri}"
            ) from exc

        try:
            async with driver.session(database=config.database_name) as session:
                result = await session.run("RETURN 1")
                await result.consume()
        except (Neo4jError, DriverError) as exc:
            logger.error("Database %s is not available at %s", config.database_name, config.db_uri)
            await driver.close()
            raise DatabaseConnectionError(
                f"couldn't open database {config.database_name} at {config.db_uri}"
            ) from exc

        logger.info("Connected to Neo4j at %s (db=%s)", config.db_uri, config.database_name)
        return cls(driver, config)

    async def close(self) -> None:
        """Close the underlying driver."""
        await self._driver.close()
        logger.info("Neo4j connection closed")

    # ─── Properties ─────────────────────────────────────────

    @property
    def db_uri(self) -> str:
        return self._config.db_uri

    @property
    def database(self) -> str:
        return self._config.database_name

    # ─── Queries ────────────────────────────────────────────

    async def execute(self, query: str) -> QueryResults:
        """Execute a query, streaming every record into canonical rows."""
        rows: list[CanonicalValue] = []
        try:
            async with self._driver.session(database=self._config.database_name) as session:
                result = await session.run(query)
                async for record in result:
                    rows.append({key: to_canonical(value) for key, value in record.items()})
        except (Neo4jError, DriverError) as exc:
            raise QueryExecutionError("couldn't execute query") from exc

        logger.debug("Neo4j query returned %d rows", len(rows))
        return query_results_from(rows)
