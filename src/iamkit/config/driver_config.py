"""
Driver configuration for IAMKit.

DriverConfig carries everything needed to build a provider client:
region, endpoint override, partition and credential overrides. It can
be built in code, loaded from a JSON or YAML file, or read from the
environment.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from iamkit.config.credentials import CloudCredentials
from iamkit.errors import ConfigurationError

# IAM is a global service; this pseudo-region routes to its endpoint
AWS_GLOBAL_REGION = "aws-global"
GCP_GLOBAL_REGION = "global"

DEFAULT_REGIONS = {
    "aws": AWS_GLOBAL_REGION,
    "gcp": GCP_GLOBAL_REGION,
}


@dataclass(frozen=True)
class DriverConfig:
    """
    Construction-time configuration for an identity driver.

    Attributes:
        provider: Provider name (aws, gcp)
        region: Region for the client. None resolves to the provider's
            global pseudo-region.
        endpoint_url: Optional endpoint override (e.g., a local emulator)
        partition: AWS partition used in generated ARNs
        credentials: Optional credential overrides
        user_agent_suffix: Optional string appended to the SDK user agent
    """

    provider: str = "aws"
    region: str | None = None
    endpoint_url: str | None = None
    partition: str = "aws"
    credentials: CloudCredentials | None = None
    user_agent_suffix: str | None = None

    def resolved_region(self) -> str:
        """Return the configured region or the provider default."""
        if self.region:
            return self.region
        return DEFAULT_REGIONS.get(self.provider, AWS_GLOBAL_REGION)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "provider": self.provider,
            "region": self.region,
            "endpoint_url": self.endpoint_url,
            "partition": self.partition,
            "credentials": self.credentials.to_dict() if self.credentials else None,
            "user_agent_suffix": self.user_agent_suffix,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DriverConfig:
        """
        Create from dictionary.

        Raises:
            ConfigurationError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Driver configuration must be a mapping")

        credentials = None
        if data.get("credentials"):
            credentials = CloudCredentials.from_dict(data["credentials"])

        return cls(
            provider=str(data.get("provider", "aws")).lower(),
            region=data.get("region"),
            endpoint_url=data.get("endpoint_url"),
            partition=data.get("partition", "aws"),
            credentials=credentials,
            user_agent_suffix=data.get("user_agent_suffix"),
        )

    @classmethod
    def from_json(cls, json_str: str) -> DriverConfig:
        """Create from JSON string."""
        try:
            return cls.from_dict(json.loads(json_str))
        except ValueError as e:
            raise ConfigurationError(f"Invalid driver configuration: {e}") from e

    @classmethod
    def from_file(cls, path: str) -> DriverConfig:
        """
        Load configuration from a JSON or YAML file.

        Raises:
            ConfigurationError: If the file cannot be parsed
        """
        path = os.path.expanduser(path)
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                return cls.from_json(f.read())

            import yaml

            try:
                return cls.from_dict(yaml.safe_load(f) or {})
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid driver configuration: {e}") from e

    def save(self, path: str) -> None:
        """Save configuration to a JSON or YAML file."""
        path = os.path.expanduser(path)
        Path(path).parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            if path.endswith(".json"):
                json.dump(self.to_dict(), f, indent=2)
            else:
                import yaml

                yaml.safe_dump(self.to_dict(), f, default_flow_style=False)


def load_config_from_env() -> DriverConfig:
    """
    Load driver configuration from environment variables.

    Environment variables:
        IAMKIT_PROVIDER: Provider name (default: aws)
        IAMKIT_REGION: Client region
        IAMKIT_ENDPOINT_URL: Endpoint override
        IAMKIT_PARTITION: AWS partition (default: aws)
        AWS_PROFILE: AWS profile name
        AWS_ROLE_ARN: Role to assume before calling IAM
        GOOGLE_APPLICATION_CREDENTIALS: GCP service account key file

    Returns:
        DriverConfig populated from the environment
    """
    credentials = None
    profile = os.getenv("AWS_PROFILE")
    role_arn = os.getenv("AWS_ROLE_ARN")
    sa_file = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if profile or role_arn or sa_file:
        credentials = CloudCredentials(
            aws_profile=profile,
            aws_role_arn=role_arn,
            gcp_service_account_file=sa_file,
        )

    return DriverConfig(
        provider=os.getenv("IAMKIT_PROVIDER", "aws").lower(),
        region=os.getenv("IAMKIT_REGION") or None,
        endpoint_url=os.getenv("IAMKIT_ENDPOINT_URL") or None,
        partition=os.getenv("IAMKIT_PARTITION", "aws"),
        credentials=credentials,
    )
