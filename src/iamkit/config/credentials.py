"""
Credential overrides for IAMKit drivers.

CloudCredentials is the hook callers use to override the SDK default
credential chain. The helpers here turn it into a boto3 Session or
google-auth credentials; they are invoked once, when a driver builds
its provider client.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from iamkit.errors import AuthenticationError

logger = logging.getLogger(__name__)

ROLE_SESSION_NAME = "iamkit"


@dataclass(frozen=True)
class CloudCredentials:
    """
    Cloud provider credentials container.

    This is a flexible container that can hold credentials for any
    cloud provider. Unused fields should be left as None, in which case
    the provider SDK's default chain applies.
    """

    # AWS credentials
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None
    aws_profile: str | None = None
    aws_role_arn: str | None = None
    aws_external_id: str | None = None

    # GCP credentials
    gcp_service_account_key: str | None = None
    gcp_service_account_file: str | None = None

    # Generic
    extra: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a credential value by key."""
        if hasattr(self, key) and key != "extra":
            return getattr(self, key) or default
        return self.extra.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting unset fields."""
        result: dict[str, Any] = {}
        for key in (
            "aws_access_key_id",
            "aws_secret_access_key",
            "aws_session_token",
            "aws_profile",
            "aws_role_arn",
            "aws_external_id",
            "gcp_service_account_key",
            "gcp_service_account_file",
        ):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.extra:
            result["extra"] = dict(self.extra)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CloudCredentials:
        """Create from dictionary."""
        return cls(
            aws_access_key_id=data.get("aws_access_key_id"),
            aws_secret_access_key=data.get("aws_secret_access_key"),
            aws_session_token=data.get("aws_session_token"),
            aws_profile=data.get("aws_profile"),
            aws_role_arn=data.get("aws_role_arn"),
            aws_external_id=data.get("aws_external_id"),
            gcp_service_account_key=data.get("gcp_service_account_key"),
            gcp_service_account_file=data.get("gcp_service_account_file"),
            extra=data.get("extra", {}),
        )


def aws_session(credentials: CloudCredentials | None, region: str) -> Any:
    """
    Build a boto3 Session honoring credential overrides.

    Args:
        credentials: Optional overrides. None uses the boto3 default chain.
        region: Region name for the session

    Returns:
        boto3.Session

    Raises:
        AuthenticationError: If the session or role assumption fails
    """
    import boto3
    from botocore.exceptions import BotoCoreError, ClientError

    credentials = credentials or CloudCredentials()
    session_kwargs: dict[str, Any] = {"region_name": region}

    if credentials.aws_profile:
        session_kwargs["profile_name"] = credentials.aws_profile

    if credentials.aws_access_key_id:
        session_kwargs["aws_access_key_id"] = credentials.aws_access_key_id
        session_kwargs["aws_secret_access_key"] = credentials.aws_secret_access_key
        if credentials.aws_session_token:
            session_kwargs["aws_session_token"] = credentials.aws_session_token

    try:
        session = boto3.Session(**session_kwargs)
    except BotoCoreError as e:
        raise AuthenticationError(f"Failed to initialize AWS session: {e}") from e

    if not credentials.aws_role_arn:
        return session

    logger.debug(f"Assuming role {credentials.aws_role_arn}")
    assume_kwargs: dict[str, Any] = {
        "RoleArn": credentials.aws_role_arn,
        "RoleSessionName": ROLE_SESSION_NAME,
    }
    if credentials.aws_external_id:
        assume_kwargs["ExternalId"] = credentials.aws_external_id

    try:
        response = session.client("sts").assume_role(**assume_kwargs)
    except (BotoCoreError, ClientError) as e:
        raise AuthenticationError(
            f"Failed to assume role {credentials.aws_role_arn}: {e}"
        ) from e

    creds = response["Credentials"]
    return boto3.Session(
        aws_access_key_id=creds["AccessKeyId"],
        aws_secret_access_key=creds["SecretAccessKey"],
        aws_session_token=creds["SessionToken"],
        region_name=region,
    )


def gcp_credentials(credentials: CloudCredentials | None) -> Any:
    """
    Build google-auth credentials honoring overrides.

    Args:
        credentials: Optional overrides

    Returns:
        google-auth credentials, or None to let the client use
        application default credentials

    Raises:
        AuthenticationError: If the service account key cannot be loaded
    """
    if credentials is None:
        return None

    from google.auth.exceptions import GoogleAuthError
    from google.oauth2 import service_account

    try:
        if credentials.gcp_service_account_file:
            return service_account.Credentials.from_service_account_file(
                credentials.gcp_service_account_file
            )
        if credentials.gcp_service_account_key:
            key_info = json.loads(credentials.gcp_service_account_key)
            return service_account.Credentials.from_service_account_info(key_info)
    except (GoogleAuthError, ValueError, OSError) as e:
        raise AuthenticationError(f"Failed to load GCP credentials: {e}") from e

    return None
