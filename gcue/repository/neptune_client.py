"""
Neptune Client

Executes openCypher queries against an AWS Neptune cluster over HTTPS.
Each call is one SigV4-signed ``POST <endpoint>/openCypher`` request; the
response document is decoded into tagged nodes and normalized into
canonical values before being handed to callers.
"""

import logging
import re
from urllib.parse import urlencode, urlsplit

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from botocore.exceptions import BotoCoreError

from gcue.domain.document import DocArray, DocObject, decode_document, normalize
from gcue.domain.results import QueryResults, query_results_from
from gcue.repository.base import QueryExecutor
from gcue.shared.exceptions import QueryExecutionError

logger = logging.getLogger("gcue.repository.neptune")

SIGNING_SERVICE = "neptune-db"
OPEN_CYPHER_PATH = "/openCypher"

_REGION_IN_HOST = re.compile(r"\.([a-z]{2}(?:-[a-z]+)+-\d+)\.neptune\.amazonaws\.com$")


def region_from_endpoint(db_uri: str) -> str | None:
    """Extract the region from a ``*.<region>.neptune.amazonaws.com`` host."""
    host = urlsplit(db_uri).hostname or ""
    match = _REGION_IN_HOST.search(host)
    return match.group(1) if match else None


class NeptuneClient(QueryExecutor):
    """Query executor for Neptune's openCypher HTTPS endpoint."""

    def __init__(
        self,
        credentials: Credentials,
        region: str,
        db_uri: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ):
        self._credentials = credentials
        self._region = region
        self._db_uri = db_uri
        self._url = db_uri.rstrip("/") + OPEN_CYPHER_PATH
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @property
    def db_uri(self) -> str:
        return self._db_uri

    @property
    def region(self) -> str:
        return self._region

    async def close(self) -> None:
        await self._http.aclose()

    def _signed_headers(self, body: bytes) -> dict[str, str]:
        """Sign the request with the current (possibly refreshed) credentials."""
        request = AWSRequest(
            method="POST",
            url=self._url,
            data=body,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        frozen = self._credentials.get_frozen_credentials()
        SigV4Auth(frozen, SIGNING_SERVICE, self._region).add_auth(request)
        return dict(request.headers.items())

    async def execute(self, query: str) -> QueryResults:
        body = urlencode({"query": query}).encode("utf-8")
        try:
            headers = self._signed_headers(body)
        except BotoCoreError as exc:
            raise QueryExecutionError("couldn't sign request with AWS credentials") from exc

        try:
            response = await self._http.post(self._url, content=body, headers=headers)
        except httpx.HTTPError as exc:
            raise QueryExecutionError("couldn't execute query") from exc

        if response.is_error:
            raise QueryExecutionError(
                f"couldn't execute query: {_describe_error(response)}"
            )

        try:
            document = decode_document(response.content)
        except ValueError as exc:
            raise QueryExecutionError("couldn't parse response body as JSON") from exc

        results = document.members.get("results") if isinstance(document, DocObject) else None
        if not isinstance(results, DocArray):
            raise QueryExecutionError("unexpected response received, was expecting an array")

        rows = normalize(results)
        logger.debug("Neptune query returned %d rows", len(rows))
        return query_results_from(rows)


def _describe_error(response: httpx.Response) -> str:
    """Summarise a Neptune error body (``code`` + ``detailedMessage``)."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        code = payload.get("code")
        detail = payload.get("detailedMessage") or payload.get("message")
        if code and detail:
            return f"{code}: {detail} (HTTP {response.status_code})"
        if detail:
            return f"{detail} (HTTP {response.status_code})"

    text = response.text.strip()
    return f"HTTP {response.status_code}" + (f": {text}" if text else "")
