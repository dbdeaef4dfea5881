"""
GCP service-account trust compiler.

On GCP "who may assume this identity" is expressed as an IAM policy on
the service account itself, granting the token creator role to each
trusted member. Members are normalized to the "type:id" form the IAM
API expects.
"""

from __future__ import annotations

from typing import Any

from iamkit.errors import InvalidArgumentError
from iamkit.models import TrustConfiguration
from iamkit.trust.base import TrustPolicyCompiler

TOKEN_CREATOR_ROLE = "roles/iam.serviceAccountTokenCreator"
SERVICE_ACCOUNT_SUFFIX = ".gserviceaccount.com"

MEMBER_PREFIXES = (
    "user:",
    "serviceAccount:",
    "group:",
    "domain:",
    "principal:",
    "principalSet:",
)


class GCPTrustPolicyCompiler(TrustPolicyCompiler):
    """Compiles TrustConfiguration into a service-account IAM policy."""

    provider_name = "gcp"

    def __init__(self, role: str = TOKEN_CREATOR_ROLE) -> None:
        self.role = role

    def member(self, principal: str) -> str:
        """Normalize a principal to an IAM member string."""
        if principal.startswith(MEMBER_PREFIXES):
            return principal
        if principal.endswith(SERVICE_ACCOUNT_SUFFIX):
            return f"serviceAccount:{principal}"
        if "@" in principal:
            return f"user:{principal}"
        return principal

    def compile(
        self,
        tenant_id: str,
        trust_config: TrustConfiguration | None = None,
    ) -> dict[str, Any] | None:
        """
        Build the service-account IAM policy.

        Args:
            tenant_id: GCP project ID that owns the service account
            trust_config: Optional trust configuration

        Returns:
            Policy dictionary with one binding, or None when no member is
            trusted (the owning project already administers the account)

        Raises:
            InvalidArgumentError: If conditions are supplied
        """
        if trust_config is not None and trust_config.has_conditions:
            raise InvalidArgumentError(
                "GCP trust policies do not support operator/key conditions"
            )

        members = [self.member(p) for p in self.iter_principals(trust_config)]
        if not members:
            return None

        return {
            "bindings": [
                {
                    "role": self.role,
                    "members": members,
                }
            ]
        }
