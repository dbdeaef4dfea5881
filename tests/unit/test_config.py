"""
Unit tests for driver configuration and credentials.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from iamkit.config import (
    AWS_GLOBAL_REGION,
    GCP_GLOBAL_REGION,
    CloudCredentials,
    DriverConfig,
    aws_session,
    gcp_credentials,
    load_config_from_env,
)
from iamkit.errors import AuthenticationError, ConfigurationError, InvalidArgumentError


class TestDriverConfig:
    """Tests for DriverConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = DriverConfig()

        assert config.provider == "aws"
        assert config.region is None
        assert config.partition == "aws"
        assert config.credentials is None

    def test_resolved_region(self):
        """Test region resolution falls back to the provider default."""
        assert DriverConfig().resolved_region() == AWS_GLOBAL_REGION
        assert DriverConfig(provider="gcp").resolved_region() == GCP_GLOBAL_REGION
        assert DriverConfig(region="eu-west-1").resolved_region() == "eu-west-1"

    def test_from_dict(self):
        """Test creating configuration from a dictionary."""
        config = DriverConfig.from_dict(
            {
                "provider": "GCP",
                "endpoint_url": "localhost:8080",
                "credentials": {"gcp_service_account_file": "/keys/sa.json"},
            }
        )

        assert config.provider == "gcp"
        assert config.endpoint_url == "localhost:8080"
        assert config.credentials.gcp_service_account_file == "/keys/sa.json"

    def test_from_dict_rejects_non_mapping(self):
        """Test non-mapping input raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            DriverConfig.from_dict(["aws"])

    def test_configuration_error_is_invalid_argument(self):
        """Test configuration errors are a kind of invalid argument."""
        assert issubclass(ConfigurationError, InvalidArgumentError)

    def test_from_json_invalid(self):
        """Test malformed JSON raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            DriverConfig.from_json("{not json")

    def test_to_dict_round_trip(self):
        """Test to_dict output is accepted by from_dict."""
        config = DriverConfig(
            provider="aws",
            region="us-east-1",
            partition="aws-cn",
            credentials=CloudCredentials(aws_profile="dev"),
            user_agent_suffix="app/1.0",
        )
        assert DriverConfig.from_dict(config.to_dict()) == config

    def test_json_file(self, tmp_path):
        """Test loading from a JSON file."""
        path = tmp_path / "iamkit.json"
        path.write_text(json.dumps({"provider": "aws", "region": "us-west-2"}))

        config = DriverConfig.from_file(str(path))

        assert config.region == "us-west-2"

    def test_yaml_file(self, tmp_path):
        """Test loading from a YAML file."""
        path = tmp_path / "iamkit.yaml"
        path.write_text("provider: aws\npartition: aws-us-gov\n")

        config = DriverConfig.from_file(str(path))

        assert config.partition == "aws-us-gov"

    def test_invalid_yaml_file(self, tmp_path):
        """Test unparseable YAML raises ConfigurationError."""
        path = tmp_path / "iamkit.yaml"
        path.write_text("provider: [aws\n")

        with pytest.raises(ConfigurationError):
            DriverConfig.from_file(str(path))

    def test_save_and_load(self, tmp_path):
        """Test saved configuration loads back unchanged."""
        config = DriverConfig(provider="gcp", endpoint_url="localhost:8080")

        for name in ("nested/config.json", "nested/config.yaml"):
            path = str(tmp_path / name)
            config.save(path)
            assert DriverConfig.from_file(path) == config


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in (
            "IAMKIT_PROVIDER",
            "IAMKIT_REGION",
            "IAMKIT_ENDPOINT_URL",
            "IAMKIT_PARTITION",
            "AWS_PROFILE",
            "AWS_ROLE_ARN",
            "GOOGLE_APPLICATION_CREDENTIALS",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        """Test an empty environment yields defaults."""
        config = load_config_from_env()

        assert config == DriverConfig()

    def test_reads_environment(self, monkeypatch):
        """Test environment variables populate the configuration."""
        monkeypatch.setenv("IAMKIT_PROVIDER", "AWS")
        monkeypatch.setenv("IAMKIT_REGION", "us-east-1")
        monkeypatch.setenv("IAMKIT_ENDPOINT_URL", "http://localhost:4566")
        monkeypatch.setenv("AWS_PROFILE", "dev")
        monkeypatch.setenv("AWS_ROLE_ARN", "arn:aws:iam::123456789012:role/Admin")

        config = load_config_from_env()

        assert config.provider == "aws"
        assert config.region == "us-east-1"
        assert config.endpoint_url == "http://localhost:4566"
        assert config.credentials.aws_profile == "dev"
        assert config.credentials.aws_role_arn == "arn:aws:iam::123456789012:role/Admin"


class TestCloudCredentials:
    """Tests for CloudCredentials."""

    def test_get(self):
        """Test get reads fields and extra values."""
        creds = CloudCredentials(aws_profile="dev", extra={"token": "t"})

        assert creds.get("aws_profile") == "dev"
        assert creds.get("token") == "t"
        assert creds.get("aws_role_arn", "none") == "none"

    def test_to_dict_omits_unset(self):
        """Test unset fields are omitted."""
        assert CloudCredentials(aws_profile="dev").to_dict() == {"aws_profile": "dev"}


class TestAwsSession:
    """Tests for aws_session."""

    def test_default_chain(self):
        """Test no overrides builds a plain session."""
        with patch("boto3.Session") as mock_session:
            session = aws_session(None, "aws-global")

        mock_session.assert_called_once_with(region_name="aws-global")
        assert session is mock_session.return_value

    def test_static_keys(self):
        """Test static keys are passed to the session."""
        creds = CloudCredentials(
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            aws_session_token="token",
        )

        with patch("boto3.Session") as mock_session:
            aws_session(creds, "us-east-1")

        mock_session.assert_called_once_with(
            region_name="us-east-1",
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            aws_session_token="token",
        )

    def test_assume_role(self):
        """Test role assumption builds a session from STS credentials."""
        creds = CloudCredentials(
            aws_role_arn="arn:aws:iam::123456789012:role/Admin",
            aws_external_id="external-id",
        )
        base_session = MagicMock()
        base_session.client.return_value.assume_role.return_value = {
            "Credentials": {
                "AccessKeyId": "ASIA",
                "SecretAccessKey": "secret",
                "SessionToken": "token",
            }
        }

        with patch("boto3.Session", side_effect=[base_session, MagicMock()]) as mock_session:
            aws_session(creds, "aws-global")

        base_session.client.return_value.assume_role.assert_called_once_with(
            RoleArn="arn:aws:iam::123456789012:role/Admin",
            RoleSessionName="iamkit",
            ExternalId="external-id",
        )
        assert mock_session.call_args.kwargs["aws_access_key_id"] == "ASIA"

    def test_assume_role_failure(self):
        """Test STS failures raise AuthenticationError."""
        creds = CloudCredentials(aws_role_arn="arn:aws:iam::123456789012:role/Admin")
        base_session = MagicMock()
        base_session.client.return_value.assume_role.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "AssumeRole"
        )

        with patch("boto3.Session", return_value=base_session):
            with pytest.raises(AuthenticationError):
                aws_session(creds, "aws-global")


class TestGcpCredentials:
    """Tests for gcp_credentials."""

    def test_none(self):
        """Test no overrides defers to application default credentials."""
        assert gcp_credentials(None) is None
        assert gcp_credentials(CloudCredentials()) is None

    def test_service_account_file(self):
        """Test a key file is loaded through google-auth."""
        creds = CloudCredentials(gcp_service_account_file="/keys/sa.json")

        with patch(
            "google.oauth2.service_account.Credentials.from_service_account_file"
        ) as mock_load:
            result = gcp_credentials(creds)

        mock_load.assert_called_once_with("/keys/sa.json")
        assert result is mock_load.return_value

    def test_invalid_key_json(self):
        """Test malformed key JSON raises AuthenticationError."""
        creds = CloudCredentials(gcp_service_account_key="{not json")

        with pytest.raises(AuthenticationError):
            gcp_credentials(creds)
