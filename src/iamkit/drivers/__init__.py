"""
Identity drivers for IAMKit.

Each driver implements the IdentityDriver contract for one cloud:

- AWS (IAM roles)
- GCP (service accounts)

Usage:
    from iamkit.drivers import get_driver

    driver = get_driver("aws")
    arn = driver.create_identity("MyRole", "", "123456789012", None)
"""

from __future__ import annotations

from typing import Any

from iamkit.config import DriverConfig
from iamkit.drivers.base import IdentityDriver
from iamkit.drivers.aws import AWS_ERROR_CODES, AWSIdentityDriver
from iamkit.drivers.gcp import GCP_HTTP_CODES, GCP_STATUS_CODES, GCPIdentityDriver

# Registry of available identity drivers
PROVIDERS: dict[str, type[IdentityDriver]] = {
    "aws": AWSIdentityDriver,
    "gcp": GCPIdentityDriver,
}


def get_driver(
    provider_name: str,
    config: DriverConfig | None = None,
    client: Any | None = None,
    **kwargs: Any,
) -> IdentityDriver:
    """
    Factory function to get an identity driver.

    Args:
        provider_name: Name of the cloud provider ("aws", "gcp")
        config: Optional driver configuration
        client: Optional pre-built provider client
        **kwargs: DriverConfig fields, used when config is None

    Returns:
        Configured IdentityDriver instance

    Raises:
        ValueError: If provider_name is not supported

    Examples:
        # AWS with the default credential chain
        aws = get_driver("aws")

        # GCP against a local emulator
        gcp = get_driver("gcp", endpoint_url="localhost:8080")
    """
    provider_name = provider_name.lower()

    if provider_name not in PROVIDERS:
        supported = ", ".join(sorted(PROVIDERS.keys()))
        raise ValueError(
            f"Unknown cloud provider: {provider_name}. "
            f"Supported providers: {supported}"
        )

    if config is None:
        config = DriverConfig(provider=provider_name, **kwargs)

    driver_class = PROVIDERS[provider_name]
    return driver_class(config=config, client=client)


def list_providers() -> list[str]:
    """Return list of supported cloud provider names."""
    return sorted(PROVIDERS.keys())


def is_provider_available(provider_name: str) -> bool:
    """
    Check if a cloud provider's SDK is available.

    Args:
        provider_name: Name of the cloud provider

    Returns:
        True if the provider's SDK is installed and available
    """
    provider_name = provider_name.lower()

    if provider_name not in PROVIDERS:
        return False

    return PROVIDERS[provider_name].is_available()


__all__ = [
    # Base class
    "IdentityDriver",
    # Provider implementations
    "AWSIdentityDriver",
    "GCPIdentityDriver",
    # Error tables
    "AWS_ERROR_CODES",
    "GCP_HTTP_CODES",
    "GCP_STATUS_CODES",
    # Factory functions
    "get_driver",
    "list_providers",
    "is_provider_available",
    # Registry
    "PROVIDERS",
]
