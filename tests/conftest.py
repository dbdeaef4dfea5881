"""
Pytest configuration and fixtures for IAMKit tests.

This module provides common fixtures used across unit and integration tests.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from iamkit.drivers import AWSIdentityDriver, GCPIdentityDriver

TENANT_ID = "123456789012"
ROLE_NAME = "TestRole"
ROLE_ARN = f"arn:aws:iam::{TENANT_ID}:role/{ROLE_NAME}"

GCP_PROJECT = "test-project"
SERVICE_ACCOUNT_EMAIL = f"test-sa@{GCP_PROJECT}.iam.gserviceaccount.com"
SERVICE_ACCOUNT_NAME = f"projects/{GCP_PROJECT}/serviceAccounts/{SERVICE_ACCOUNT_EMAIL}"


def make_client_error(
    code: str,
    operation: str = "CreateRole",
    message: str = "error",
) -> ClientError:
    """Build a botocore ClientError carrying an IAM error code."""
    return ClientError(
        {"Error": {"Code": code, "Message": message}, "ResponseMetadata": {}},
        operation,
    )


class InMemoryIamClient:
    """
    Minimal stand-in for a boto3 IAM client.

    Implements the role calls the AWS driver makes, raising the same
    ClientError codes IAM returns.
    """

    def __init__(self, account_id: str = TENANT_ID) -> None:
        self.account_id = account_id
        self.roles: dict[str, dict[str, Any]] = {}
        self.inline_policies: dict[str, dict[str, str]] = {}
        self.create_calls: list[dict[str, Any]] = []

    def _arn(self, name: str, path: str) -> str:
        return f"arn:aws:iam::{self.account_id}:role{path}{name}"

    def create_role(self, **kwargs: Any) -> dict[str, Any]:
        self.create_calls.append(kwargs)
        name = kwargs["RoleName"]
        if name in self.roles:
            raise make_client_error(
                "EntityAlreadyExists", "CreateRole", f"Role with name {name} already exists."
            )
        role = {
            "RoleName": name,
            "Path": kwargs.get("Path", "/"),
            "Arn": self._arn(name, kwargs.get("Path", "/")),
            "AssumeRolePolicyDocument": kwargs["AssumeRolePolicyDocument"],
        }
        self.roles[name] = role
        return {"Role": role}

    def get_role(self, RoleName: str) -> dict[str, Any]:
        if RoleName not in self.roles:
            raise make_client_error(
                "NoSuchEntity", "GetRole", f"The role with name {RoleName} cannot be found."
            )
        return {"Role": self.roles[RoleName]}

    def delete_role(self, RoleName: str) -> dict[str, Any]:
        if RoleName not in self.roles:
            raise make_client_error(
                "NoSuchEntity", "DeleteRole", f"The role with name {RoleName} cannot be found."
            )
        if self.inline_policies.get(RoleName):
            raise make_client_error(
                "DeleteConflict", "DeleteRole", "Cannot delete entity, must delete policies first."
            )
        del self.roles[RoleName]
        return {}

    def put_role_policy(self, RoleName: str, PolicyName: str, PolicyDocument: str) -> dict:
        self.get_role(RoleName)
        self.inline_policies.setdefault(RoleName, {})[PolicyName] = PolicyDocument
        return {}

    def delete_role_policy(self, RoleName: str, PolicyName: str) -> dict:
        policies = self.inline_policies.get(RoleName, {})
        if PolicyName not in policies:
            raise make_client_error("NoSuchEntity", "DeleteRolePolicy")
        del policies[PolicyName]
        return {}

    def close(self) -> None:
        pass


@pytest.fixture
def client_error():
    """Return a factory for botocore ClientErrors."""
    return make_client_error


@pytest.fixture
def mock_iam_client() -> MagicMock:
    """Return a mocked boto3 IAM client with sample responses."""
    client = MagicMock()
    client.create_role.return_value = {
        "Role": {"RoleName": ROLE_NAME, "Arn": ROLE_ARN, "Path": "/"}
    }
    client.get_role.return_value = {
        "Role": {"RoleName": ROLE_NAME, "Arn": ROLE_ARN, "Path": "/"}
    }
    client.delete_role.return_value = {}
    return client


@pytest.fixture
def aws_driver(mock_iam_client: MagicMock) -> AWSIdentityDriver:
    """Return an AWS driver wired to the mocked IAM client."""
    return AWSIdentityDriver(client=mock_iam_client)


@pytest.fixture
def in_memory_iam_client() -> InMemoryIamClient:
    """Return an in-memory IAM client."""
    return InMemoryIamClient()


@pytest.fixture
def mock_service_account() -> MagicMock:
    """Return a mocked GCP ServiceAccount response."""
    account = MagicMock()
    account.name = SERVICE_ACCOUNT_NAME
    account.email = SERVICE_ACCOUNT_EMAIL
    return account


@pytest.fixture
def mock_gcp_client(mock_service_account: MagicMock) -> MagicMock:
    """Return a mocked IAM Admin client."""
    client = MagicMock()
    client.create_service_account.return_value = mock_service_account
    client.get_service_account.return_value = mock_service_account
    client.delete_service_account.return_value = None
    return client


@pytest.fixture
def gcp_driver(mock_gcp_client: MagicMock) -> GCPIdentityDriver:
    """Return a GCP driver wired to the mocked IAM Admin client."""
    return GCPIdentityDriver(client=mock_gcp_client)
