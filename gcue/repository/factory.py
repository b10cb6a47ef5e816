"""
Backend selection.

The DB_URI scheme is inspected exactly once: ``bolt`` selects Neo4j,
``http``/``https`` select Neptune. Every configuration problem is raised
before a connection is attempted.
"""

import logging

import botocore.session
from botocore.exceptions import BotoCoreError

from gcue.repository.base import QueryExecutor
from gcue.repository.neo4j_client import Neo4jClient, Neo4jConfig
from gcue.repository.neptune_client import NeptuneClient, region_from_endpoint
from gcue.shared.config import GcueSettings, require
from gcue.shared.exceptions import ConfigurationError, DatabaseConnectionError

logger = logging.getLogger("gcue.repository.factory")

NEPTUNE_SCHEMES = ("http", "https")
NEO4J_SCHEMES = ("bolt",)

_INVALID_URI = (
    'db uri must be a valid uri, eg. "bolt://127.0.0.1:7687", '
    'or "https://abc.xyz.us-east-1.neptune.amazonaws.com:8182"'
)
_INVALID_SCHEME = "db uri must have one of the following protocols: [http, https, bolt]"


def uri_scheme(db_uri: str) -> str:
    """Return the scheme of a DB URI, validating it is one gcue supports.

    Raises:
        ConfigurationError: If the URI has no ``://`` separator or an
            unsupported scheme.
    """
    scheme, separator, _ = db_uri.partition("://")
    if not separator:
        raise ConfigurationError(_INVALID_URI)
    if scheme not in NEPTUNE_SCHEMES + NEO4J_SCHEMES:
        raise ConfigurationError(_INVALID_SCHEME)
    return scheme


def neptune_credentials(session: botocore.session.Session | None = None):
    """Resolve and fetch AWS credentials from the default provider chain.

    Raises:
        DatabaseConnectionError: If no credentials are available or they
            can't be fetched.
    """
    session = session or botocore.session.get_session()
    try:
        credentials = session.get_credentials()
        if credentials is None:
            raise DatabaseConnectionError("couldn't fetch AWS credentials: none configured")
        credentials.get_frozen_credentials()
    except BotoCoreError as exc:
        raise DatabaseConnectionError("couldn't fetch AWS credentials") from exc
    return credentials


def neptune_region(settings: GcueSettings, db_uri: str, session: botocore.session.Session | None = None) -> str:
    session = session or botocore.session.get_session()
    region = (
        settings.aws_region
        or session.get_config_variable("region")
        or region_from_endpoint(db_uri)
    )
    if not region:
        raise ConfigurationError(
            "couldn't determine the AWS region; set AWS_REGION or use a Neptune cluster endpoint"
        )
    return region


async def get_db_client(settings: GcueSettings) -> QueryExecutor:
    """Build the query executor matching DB_URI's scheme.

    Raises:
        ConfigurationError: For a missing or malformed DB_URI, an
            unsupported scheme, or missing companion settings.
        DatabaseConnectionError: If the backend can't be reached or
            credentials can't be fetched.
    """
    db_uri = require(settings, "db_uri")
    scheme = uri_scheme(db_uri)

    if scheme in NEPTUNE_SCHEMES:
        session = botocore.session.get_session()
        region = neptune_region(settings, db_uri, session)
        credentials = neptune_credentials(session)
        logger.info("Using Neptune at %s (region=%s)", db_uri, region)
        return NeptuneClient(credentials, region, db_uri)

    config = Neo4jConfig(
        db_uri=db_uri,
        user=require(settings, "neo4j_user"),
        password=require(settings, "neo4j_password"),
        database_name=require(settings, "neo4j_db"),
    )
    return await Neo4jClient.connect(config)
