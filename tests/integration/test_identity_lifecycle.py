"""
Integration tests for the identity lifecycle.

Runs the public client against an in-memory IAM backend that raises
the same botocore errors as the real service.
"""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from iamkit import IdentityClient
from iamkit.errors import (
    FailedPreconditionError,
    ResourceNotFoundError,
)
from iamkit.models import CreateOptions, PolicyDocument, Statement, TrustConfiguration

TENANT_ID = "123456789012"
ROLE_NAME = "TestRole"
ROLE_ARN = f"arn:aws:iam::{TENANT_ID}:role/{ROLE_NAME}"


@pytest.fixture
def iam(in_memory_iam_client) -> IdentityClient:
    return IdentityClient.create("aws", client=in_memory_iam_client)


class TestIdentityLifecycle:
    """End-to-end create, lookup and delete."""

    def test_create_get_delete(self, iam, in_memory_iam_client):
        """Test a role can be created, found and deleted."""
        arn = iam.create_identity(ROLE_NAME, "Test role", TENANT_ID, None)

        assert arn == ROLE_ARN
        assert iam.get_identity(ROLE_NAME, TENANT_ID, None) == ROLE_ARN
        trust = json.loads(in_memory_iam_client.roles[ROLE_NAME]["AssumeRolePolicyDocument"])
        assert trust["Statement"][0]["Principal"] == {"AWS": f"arn:aws:iam::{TENANT_ID}:root"}

        iam.delete_identity(ROLE_NAME, TENANT_ID, None)

        with pytest.raises(ResourceNotFoundError):
            iam.get_identity(ROLE_NAME, TENANT_ID, None)

    def test_repeated_create_returns_same_handle(self, iam, in_memory_iam_client):
        """Test creating twice returns the first role without replacing it."""
        first = iam.create_identity(ROLE_NAME, "", TENANT_ID, None)
        second = iam.create_identity(
            ROLE_NAME,
            "",
            TENANT_ID,
            None,
            trust_config=TrustConfiguration(("ec2.amazonaws.com",)),
        )

        assert first == second == ROLE_ARN
        assert len(in_memory_iam_client.create_calls) == 2
        assert len(in_memory_iam_client.roles) == 1

    def test_concurrent_create_returns_same_handle(self, iam, in_memory_iam_client, monkeypatch):
        """Test a create that loses the race to another caller returns the winner's role."""
        create_role = in_memory_iam_client.create_role

        def create_role_after_competitor(**kwargs):
            if not in_memory_iam_client.create_calls:
                create_role(**kwargs)
            return create_role(**kwargs)

        monkeypatch.setattr(in_memory_iam_client, "create_role", create_role_after_competitor)

        with ThreadPoolExecutor(max_workers=2) as executor:
            futures = [
                executor.submit(iam.create_identity, ROLE_NAME, "", TENANT_ID, None)
                for _ in range(2)
            ]
            handles = [future.result() for future in futures]

        assert handles == [ROLE_ARN, ROLE_ARN]
        assert list(in_memory_iam_client.roles) == [ROLE_NAME]

    def test_path_option_in_handle(self, iam):
        """Test a role path is reflected in the returned ARN."""
        arn = iam.create_identity(
            ROLE_NAME, "", TENANT_ID, None, options=CreateOptions(path="/service-roles/")
        )
        assert arn == f"arn:aws:iam::{TENANT_ID}:role/service-roles/{ROLE_NAME}"

    def test_delete_missing_role(self, iam):
        """Test deleting an absent role raises ResourceNotFoundError."""
        with pytest.raises(ResourceNotFoundError):
            iam.delete_identity("Missing", TENANT_ID, None)

    def test_delete_with_inline_policy_then_cleanup(self, iam):
        """Test a role with policies cannot be deleted until they are removed."""
        iam.create_identity(ROLE_NAME, "", TENANT_ID, None)
        policy = PolicyDocument(
            statements=(Statement(actions=("s3:GetObject",), resources=("*",)),)
        )
        iam.attach_inline_policy(ROLE_NAME, "ReadObjects", policy, TENANT_ID, None)

        with pytest.raises(FailedPreconditionError):
            iam.delete_identity(ROLE_NAME, TENANT_ID, None)

        iam.remove_policy(ROLE_NAME, "ReadObjects", TENANT_ID, None)
        iam.delete_identity(ROLE_NAME, TENANT_ID, None)

        with pytest.raises(ResourceNotFoundError):
            iam.get_identity(ROLE_NAME, TENANT_ID, None)

    def test_attach_to_missing_role(self, iam):
        """Test attaching a policy to an absent role raises ResourceNotFoundError."""
        with pytest.raises(ResourceNotFoundError):
            iam.attach_inline_policy("Missing", "P", PolicyDocument(), TENANT_ID, None)
