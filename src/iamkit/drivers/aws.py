"""
AWS identity driver.

Identities are IAM roles. The role's AssumeRolePolicyDocument is
compiled from the caller's TrustConfiguration, and the role ARN is the
handle returned to callers. Uses boto3 for all IAM API interactions.
"""

from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Any
from urllib.parse import unquote

from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from iamkit.config import DriverConfig, aws_session
from iamkit.drivers.base import IdentityDriver
from iamkit.errors import (
    AuthenticationError,
    DeadlineExceededError,
    FailedPreconditionError,
    IamError,
    InvalidArgumentError,
    PermissionDeniedError,
    ResourceAlreadyExistsError,
    ResourceConflictError,
    ResourceExhaustedError,
    ResourceNotFoundError,
    UnknownError,
)
from iamkit.models import CreateOptions, PolicyDocument, TrustConfiguration
from iamkit.trust import AWSTrustPolicyCompiler

logger = logging.getLogger(__name__)

# IAM error codes -> canonical errors
AWS_ERROR_CODES: MappingProxyType[str, type[IamError]] = MappingProxyType(
    {
        "NoSuchEntity": ResourceNotFoundError,
        "EntityAlreadyExists": ResourceAlreadyExistsError,
        "InvalidInput": InvalidArgumentError,
        "MalformedPolicyDocument": InvalidArgumentError,
        "ValidationError": InvalidArgumentError,
        "DeleteConflict": FailedPreconditionError,
        "UnmodifiableEntity": FailedPreconditionError,
        "EntityTemporarilyUnmodifiable": ResourceConflictError,
        "ConcurrentModification": ResourceConflictError,
        "LimitExceeded": ResourceExhaustedError,
        "Throttling": ResourceExhaustedError,
        "AccessDenied": PermissionDeniedError,
        "AccessDeniedException": PermissionDeniedError,
        "InvalidClientTokenId": AuthenticationError,
        "SignatureDoesNotMatch": AuthenticationError,
        "ExpiredToken": AuthenticationError,
        "ServiceFailure": UnknownError,
    }
)


def build_iam_client(config: DriverConfig) -> Any:
    """
    Build a boto3 IAM client from driver configuration.

    Args:
        config: Driver configuration. A missing region resolves to the
            aws-global pseudo-region since IAM is a global service.

    Returns:
        boto3 IAM client
    """
    region = config.resolved_region()
    session = aws_session(config.credentials, region)

    client_kwargs: dict[str, Any] = {"region_name": region}
    if config.endpoint_url:
        client_kwargs["endpoint_url"] = config.endpoint_url
    if config.user_agent_suffix:
        client_kwargs["config"] = Config(user_agent_extra=config.user_agent_suffix)

    return session.client("iam", **client_kwargs)


class AWSIdentityDriver(IdentityDriver):
    """
    AWS IAM role driver.

    Policy attachment operations manage inline role policies through
    put/get/delete_role_policy; get_attached_policies also lists
    attached managed policy ARNs.
    """

    provider_id = "aws"

    def __init__(
        self,
        config: DriverConfig | None = None,
        client: Any | None = None,
    ) -> None:
        """
        Initialize the AWS driver.

        Args:
            config: Optional driver configuration
            client: Optional pre-built boto3 IAM client. When given, the
                driver does not build its own.
        """
        super().__init__(config)
        self._compiler = AWSTrustPolicyCompiler(partition=self.config.partition)
        self._owns_client = client is None
        self._client = client if client is not None else build_iam_client(self.config)

    @property
    def client(self) -> Any:
        """Get the boto3 IAM client."""
        return self._client

    @classmethod
    def is_available(cls) -> bool:
        """Check if boto3 is installed."""
        try:
            import boto3  # noqa: F401
            return True
        except ImportError:
            return False

    @classmethod
    def get_required_packages(cls) -> list[str]:
        return ["boto3"]

    def build_assume_role_policy_document(
        self,
        tenant_id: str,
        trust_config: TrustConfiguration | None = None,
    ) -> str:
        """Compile the assume-role policy JSON for a role in tenant_id."""
        return self._compiler.compile_json(tenant_id, trust_config)

    def _do_create_identity(
        self,
        name: str,
        description: str,
        tenant_id: str,
        region: str | None,
        trust_config: TrustConfiguration | None,
        options: CreateOptions | None,
    ) -> str:
        params: dict[str, Any] = {
            "RoleName": name,
            "AssumeRolePolicyDocument": self.build_assume_role_policy_document(
                tenant_id, trust_config
            ),
            "Description": description,
        }

        if options is not None:
            if options.path and options.path.strip():
                params["Path"] = options.path
            if options.max_session_duration is not None:
                params["MaxSessionDuration"] = options.max_session_duration
            if options.permission_boundary and options.permission_boundary.strip():
                params["PermissionsBoundary"] = options.permission_boundary

        logger.debug(f"Creating IAM role {name}")
        response = self._client.create_role(**params)
        return response["Role"]["Arn"]

    def _do_get_identity(self, name: str, tenant_id: str, region: str | None) -> str | None:
        logger.debug(f"Getting IAM role {name}")
        response = self._client.get_role(RoleName=name)
        role = response.get("Role")
        return role["Arn"] if role else None

    def _do_delete_identity(self, name: str, tenant_id: str, region: str | None) -> None:
        logger.debug(f"Deleting IAM role {name}")
        self._client.delete_role(RoleName=name)

    def _do_attach_inline_policy(
        self,
        identity_name: str,
        policy_name: str,
        policy_document: PolicyDocument,
        tenant_id: str,
        region: str | None,
    ) -> None:
        logger.debug(f"Putting inline policy {policy_name} on role {identity_name}")
        self._client.put_role_policy(
            RoleName=identity_name,
            PolicyName=policy_name,
            PolicyDocument=policy_document.to_json(),
        )

    def _do_get_inline_policy_details(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> str:
        response = self._client.get_role_policy(
            RoleName=identity_name,
            PolicyName=policy_name,
        )
        document = response["PolicyDocument"]
        # boto3 decodes policy documents to dicts; raw responses are URL-encoded
        if isinstance(document, str):
            return unquote(document)
        return json.dumps(document, separators=(",", ":"))

    def _do_get_attached_policies(
        self,
        identity_name: str,
        tenant_id: str,
        region: str | None,
    ) -> list[str]:
        policies: list[str] = []
        policies.extend(
            self._paginate("list_role_policies", "PolicyNames", RoleName=identity_name)
        )
        for attached in self._paginate(
            "list_attached_role_policies", "AttachedPolicies", RoleName=identity_name
        ):
            policies.append(attached["PolicyArn"])
        return policies

    def _do_remove_policy(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> None:
        logger.debug(f"Deleting inline policy {policy_name} from role {identity_name}")
        self._client.delete_role_policy(RoleName=identity_name, PolicyName=policy_name)

    def _paginate(self, method: str, result_key: str, **kwargs: Any):
        paginator = self._client.get_paginator(method)
        for page in paginator.paginate(**kwargs):
            for item in page.get(result_key, []):
                yield item

    def _map_provider_exception(self, exc: BaseException) -> type[IamError]:
        if isinstance(exc, ClientError):
            code = exc.response.get("Error", {}).get("Code")
            return AWS_ERROR_CODES.get(code, UnknownError)
        if isinstance(exc, (ConnectTimeoutError, ReadTimeoutError)):
            return DeadlineExceededError
        if isinstance(exc, (BotoCoreError, ValueError)):
            return InvalidArgumentError
        return UnknownError

    def close(self) -> None:
        """Close the HTTP connections of a client this driver built."""
        if self._owns_client:
            self._client.close()
