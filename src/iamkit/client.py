"""
Public entry point for IAMKit.

IdentityClient holds one driver and forwards every call to it, so
application code depends on a single class whatever the cloud.
"""

from __future__ import annotations

from typing import Any

from iamkit.config import DriverConfig
from iamkit.drivers import IdentityDriver, get_driver
from iamkit.models import CreateOptions, PolicyDocument, TrustConfiguration


class IdentityClient:
    """
    Provider-neutral identity client.

    Usage:
        with IdentityClient.create("aws") as iam:
            arn = iam.create_identity(
                "MyRole",
                "Application role",
                tenant_id="123456789012",
                region=None,
                trust_config=TrustConfiguration(("ec2.amazonaws.com",)),
            )
    """

    def __init__(self, driver: IdentityDriver) -> None:
        self._driver = driver

    @classmethod
    def create(
        cls,
        provider_name: str,
        config: DriverConfig | None = None,
        client: Any | None = None,
        **kwargs: Any,
    ) -> IdentityClient:
        """Build a client around a driver from the provider registry."""
        return cls(get_driver(provider_name, config=config, client=client, **kwargs))

    @property
    def driver(self) -> IdentityDriver:
        return self._driver

    @property
    def provider_id(self) -> str:
        return self._driver.provider_id

    def create_identity(
        self,
        name: str,
        description: str | None,
        tenant_id: str,
        region: str | None,
        trust_config: TrustConfiguration | None = None,
        options: CreateOptions | None = None,
    ) -> str:
        return self._driver.create_identity(
            name, description, tenant_id, region, trust_config, options
        )

    def get_identity(self, name: str, tenant_id: str, region: str | None) -> str:
        return self._driver.get_identity(name, tenant_id, region)

    def delete_identity(self, name: str, tenant_id: str, region: str | None) -> None:
        self._driver.delete_identity(name, tenant_id, region)

    def attach_inline_policy(
        self,
        identity_name: str,
        policy_name: str,
        policy_document: PolicyDocument,
        tenant_id: str,
        region: str | None,
    ) -> None:
        self._driver.attach_inline_policy(
            identity_name, policy_name, policy_document, tenant_id, region
        )

    def get_inline_policy_details(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> str:
        return self._driver.get_inline_policy_details(
            identity_name, policy_name, tenant_id, region
        )

    def get_attached_policies(
        self,
        identity_name: str,
        tenant_id: str,
        region: str | None,
    ) -> list[str]:
        return self._driver.get_attached_policies(identity_name, tenant_id, region)

    def remove_policy(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> None:
        self._driver.remove_policy(identity_name, policy_name, tenant_id, region)

    def close(self) -> None:
        self._driver.close()

    def __enter__(self) -> IdentityClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"IdentityClient(provider={self.provider_id})"
