"""
Query executor base.

Both backends (Neo4j over Bolt, Neptune over HTTPS) implement this
interface. The backend is chosen once at startup; callers never branch
on which one they hold.
"""

from abc import ABC, abstractmethod

from gcue.domain.results import QueryResults


class QueryExecutor(ABC):
    """Executes opaque query strings and returns canonical results."""

    @property
    @abstractmethod
    def db_uri(self) -> str:
        """Connection string shown to the operator."""

    @abstractmethod
    async def execute(self, query: str) -> QueryResults:
        """Run a query and collect every row.

        Raises:
            QueryExecutionError: If the backend rejects the query or
                answers with an unexpected response.
        """

    async def close(self) -> None:
        """Release the backend connection."""

    async def __aenter__(self) -> "QueryExecutor":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
