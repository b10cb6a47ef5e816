"""
Unit tests for backend selection from DB_URI.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botocore.credentials import Credentials
from botocore.exceptions import NoCredentialsError

from gcue.repository.factory import get_db_client, neptune_credentials, uri_scheme
from gcue.repository.neo4j_client import Neo4jConfig
from gcue.repository.neptune_client import NeptuneClient
from gcue.shared.config import GcueSettings
from gcue.shared.exceptions import ConfigurationError, DatabaseConnectionError

NEPTUNE_URI = "https://abc.xyz.us-east-1.neptune.amazonaws.com:8182"


def _settings(**values) -> GcueSettings:
    fields = {
        "db_uri": None,
        "neo4j_user": None,
        "neo4j_password": None,
        "neo4j_db": None,
        "aws_region": None,
    }
    fields.update(values)
    return GcueSettings(_env_file=None, **fields)


def _boto_session(credentials=None, region=None) -> MagicMock:
    session = MagicMock()
    session.get_credentials.return_value = credentials
    session.get_config_variable.return_value = region
    return session


class TestUriScheme:

    @pytest.mark.parametrize("uri, scheme", [
        ("bolt://127.0.0.1:7687", "bolt"),
        ("http://localhost:8182", "http"),
        (NEPTUNE_URI, "https"),
    ])
    def test_supported_schemes(self, uri, scheme):
        assert uri_scheme(uri) == scheme

    @pytest.mark.parametrize("uri", ["ftp://host", "neo4j://host:7687"])
    def test_unsupported_scheme_lists_accepted_ones(self, uri):
        with pytest.raises(ConfigurationError, match=r"\[http, https, bolt\]"):
            uri_scheme(uri)

    def test_uri_without_scheme_separator(self):
        with pytest.raises(ConfigurationError, match="db uri must be a valid uri"):
            uri_scheme("127.0.0.1:7687")


class TestGetDbClient:

    async def test_missing_db_uri(self):
        with pytest.raises(ConfigurationError, match="DB_URI is not set"):
            await get_db_client(_settings())

    async def test_bad_scheme_fails_before_connecting(self):
        with patch("gcue.repository.factory.Neo4jClient") as mock_neo4j, \
                patch("gcue.repository.factory.botocore.session.get_session") as mock_session:
            with pytest.raises(ConfigurationError, match=r"\[http, https, bolt\]"):
                await get_db_client(_settings(db_uri="ftp://host"))

        mock_neo4j.connect.assert_not_called()
        mock_session.assert_not_called()

    async def test_bolt_requires_companion_credentials(self):
        settings = _settings(db_uri="bolt://127.0.0.1:7687", neo4j_user="neo4j", neo4j_password="secret")

        with patch("gcue.repository.factory.Neo4jClient") as mock_neo4j:
            with pytest.raises(ConfigurationError, match="NEO4J_DB is not set"):
                await get_db_client(settings)

        mock_neo4j.connect.assert_not_called()

    async def test_bolt_selects_neo4j(self):
        settings = _settings(
            db_uri="bolt://127.0.0.1:7687",
            neo4j_user="neo4j",
            neo4j_password="secret",
            neo4j_db="neo4j",
        )
        with patch("gcue.repository.factory.Neo4jClient") as mock_neo4j:
            mock_neo4j.connect = AsyncMock(return_value="neo4j-client")

            client = await get_db_client(settings)

        assert client == "neo4j-client"
        mock_neo4j.connect.assert_awaited_once_with(
            Neo4jConfig(
                db_uri="bolt://127.0.0.1:7687",
                user="neo4j",
                password="secret",
                database_name="neo4j",
            )
        )

    async def test_https_selects_neptune(self):
        session = _boto_session(credentials=Credentials("AKID", "secret"))
        with patch("gcue.repository.factory.botocore.session.get_session", return_value=session):
            client = await get_db_client(_settings(db_uri=NEPTUNE_URI))

        assert isinstance(client, NeptuneClient)
        assert client.db_uri == NEPTUNE_URI
        assert client.region == "us-east-1"
        await client.close()

    async def test_region_setting_wins(self):
        session = _boto_session(credentials=Credentials("AKID", "secret"), region="eu-west-1")
        with patch("gcue.repository.factory.botocore.session.get_session", return_value=session):
            client = await get_db_client(_settings(db_uri=NEPTUNE_URI, aws_region="ap-south-1"))

        assert client.region == "ap-south-1"
        await client.close()

    async def test_unknown_region_is_a_configuration_error(self):
        session = _boto_session(credentials=Credentials("AKID", "secret"))
        with patch("gcue.repository.factory.botocore.session.get_session", return_value=session):
            with pytest.raises(ConfigurationError, match="AWS region"):
                await get_db_client(_settings(db_uri="http://localhost:8182"))

    async def test_missing_aws_credentials(self):
        session = _boto_session(credentials=None)
        with patch("gcue.repository.factory.botocore.session.get_session", return_value=session):
            with pytest.raises(DatabaseConnectionError, match="couldn't fetch AWS credentials"):
                await get_db_client(_settings(db_uri=NEPTUNE_URI))


def test_credential_fetch_failure_is_chained():
    credentials = MagicMock()
    credentials.get_frozen_credentials.side_effect = NoCredentialsError()
    session = _boto_session(credentials=credentials)

    with pytest.raises(DatabaseConnectionError) as exc_info:
        neptune_credentials(session)

    assert isinstance(exc_info.value.__cause__, NoCredentialsError)
