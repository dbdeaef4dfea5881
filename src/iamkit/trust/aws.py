"""
AWS assume-role policy compiler.

Trusted principals are classified in a fixed priority order:

- "arn:..." is a direct principal, used verbatim
- a bare 12-digit account ID becomes that account's root ARN
- "*.amazonaws.com" is a service principal, used verbatim
- anything else is passed through as a direct principal and left for
  IAM to reject if invalid

A role created with no usable principal trusts its own account root.
"""

from __future__ import annotations

import re
from typing import Any

from iamkit.models import DEFAULT_POLICY_VERSION, TrustConfiguration, scalar_or_list
from iamkit.trust.base import PrincipalBucket, TrustPolicyCompiler

ASSUME_ROLE_ACTION = "sts:AssumeRole"
ARN_PREFIX = "arn:"
SERVICE_PRINCIPAL_SUFFIX = ".amazonaws.com"

ACCOUNT_ID_PATTERN = re.compile(r"[0-9]{12}")


class AWSTrustPolicyCompiler(TrustPolicyCompiler):
    """Compiles TrustConfiguration into an IAM AssumeRolePolicyDocument."""

    provider_name = "aws"

    def __init__(self, partition: str = "aws") -> None:
        """
        Initialize the compiler.

        Args:
            partition: AWS partition used in root ARNs
                (aws, aws-cn, aws-us-gov)
        """
        self.partition = partition

    def account_root(self, account_id: str) -> str:
        """Return the root principal ARN of an account."""
        return f"arn:{self.partition}:iam::{account_id}:root"

    def classify(self, principal: str) -> tuple[PrincipalBucket, str]:
        """
        Classify a single principal.

        Args:
            principal: Raw principal string (non-blank)

        Returns:
            Tuple of (bucket, value to emit)
        """
        if principal.startswith(ARN_PREFIX):
            return PrincipalBucket.DIRECT, principal
        if ACCOUNT_ID_PATTERN.fullmatch(principal):
            return PrincipalBucket.DIRECT, self.account_root(principal)
        if principal.endswith(SERVICE_PRINCIPAL_SUFFIX):
            return PrincipalBucket.SERVICE, principal
        return PrincipalBucket.DIRECT, principal

    def compile(
        self,
        tenant_id: str,
        trust_config: TrustConfiguration | None = None,
    ) -> dict[str, Any]:
        """
        Build the assume-role policy document.

        Args:
            tenant_id: AWS account ID that owns the role
            trust_config: Optional trust configuration

        Returns:
            Policy document dictionary with a single Allow statement
        """
        aws_principals: list[str] = []
        service_principals: list[str] = []

        for principal in self.iter_principals(trust_config):
            bucket, value = self.classify(principal)
            if bucket == PrincipalBucket.SERVICE:
                service_principals.append(value)
            else:
                aws_principals.append(value)

        if not aws_principals and not service_principals:
            aws_principals.append(self.account_root(tenant_id))

        principal_block: dict[str, Any] = {}
        if aws_principals:
            principal_block["AWS"] = scalar_or_list(aws_principals)
        if service_principals:
            principal_block["Service"] = scalar_or_list(service_principals)

        statement: dict[str, Any] = {
            "Effect": "Allow",
            "Action": ASSUME_ROLE_ACTION,
            "Principal": principal_block,
        }
        if trust_config is not None and trust_config.has_conditions:
            statement["Condition"] = trust_config.conditions_to_dict()

        return {
            "Version": DEFAULT_POLICY_VERSION,
            "Statement": [statement],
        }
