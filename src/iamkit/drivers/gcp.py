"""
GCP identity driver.

Identities are service accounts in the tenant project. The account's
email is the handle returned to callers. Trusted principals receive
the token creator role on the account through its IAM policy.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any

from google.api_core.exceptions import GoogleAPICallError
from google.auth.exceptions import GoogleAuthError
from google.cloud import iam_admin_v1
from google.iam.v1 import iam_policy_pb2, policy_pb2

from iamkit.config import DriverConfig, gcp_credentials
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
    UnsupportedOperationError,
)
from iamkit.models import CreateOptions, TrustConfiguration
from iamkit.trust import GCPTrustPolicyCompiler

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_DOMAIN = "iam.gserviceaccount.com"

# gRPC status names -> canonical errors
GCP_STATUS_CODES: MappingProxyType[str, type[IamError]] = MappingProxyType(
    {
        "INVALID_ARGUMENT": InvalidArgumentError,
        "OUT_OF_RANGE": InvalidArgumentError,
        "NOT_FOUND": ResourceNotFoundError,
        "ALREADY_EXISTS": ResourceAlreadyExistsError,
        "ABORTED": ResourceConflictError,
        "FAILED_PRECONDITION": FailedPreconditionError,
        "PERMISSION_DENIED": PermissionDeniedError,
        "UNAUTHENTICATED": AuthenticationError,
        "RESOURCE_EXHAUSTED": ResourceExhaustedError,
        "DEADLINE_EXCEEDED": DeadlineExceededError,
        "UNIMPLEMENTED": UnsupportedOperationError,
    }
)

# HTTP status codes, for errors raised without a gRPC status
GCP_HTTP_CODES: MappingProxyType[int, type[IamError]] = MappingProxyType(
    {
        400: InvalidArgumentError,
        401: AuthenticationError,
        403: PermissionDeniedError,
        404: ResourceNotFoundError,
        409: ResourceConflictError,
        412: FailedPreconditionError,
        429: ResourceExhaustedError,
        501: UnsupportedOperationError,
        504: DeadlineExceededError,
    }
)


def build_iam_client(config: DriverConfig) -> Any:
    """
    Build an IAM Admin client from driver configuration.

    Args:
        config: Driver configuration. The region is not used; the IAM
            Admin API is global.

    Returns:
        iam_admin_v1.IAMClient
    """
    client_kwargs: dict[str, Any] = {}
    credentials = gcp_credentials(config.credentials)
    if credentials is not None:
        client_kwargs["credentials"] = credentials
    if config.endpoint_url:
        client_kwargs["client_options"] = {"api_endpoint": config.endpoint_url}
    return iam_admin_v1.IAMClient(**client_kwargs)


def service_account_email(name: str, tenant_id: str) -> str:
    """Return the email of account `name` in project `tenant_id`."""
    if "@" in name:
        return name
    return f"{name}@{tenant_id}.{SERVICE_ACCOUNT_DOMAIN}"


def service_account_resource(name: str, tenant_id: str) -> str:
    """Return the full resource name of a service account."""
    return f"projects/{tenant_id}/serviceAccounts/{service_account_email(name, tenant_id)}"


class GCPIdentityDriver(IdentityDriver):
    """
    GCP service account driver.

    CreateOptions have no service account counterpart and are ignored
    with a warning. Policy attachment operations are not supported.
    """

    provider_id = "gcp"

    def __init__(
        self,
        config: DriverConfig | None = None,
        client: Any | None = None,
    ) -> None:
        """
        Initialize the GCP driver.

        Args:
            config: Optional driver configuration
            client: Optional pre-built IAMClient. When given, the driver
                does not build its own.
        """
        super().__init__(config)
        self._compiler = GCPTrustPolicyCompiler()
        self._owns_client = client is None
        self._client = client if client is not None else build_iam_client(self.config)

    @property
    def client(self) -> Any:
        """Get the IAM Admin client."""
        return self._client

    @classmethod
    def is_available(cls) -> bool:
        """Check if google-cloud-iam is installed."""
        try:
            from google.cloud import iam_admin_v1  # noqa: F401
            return True
        except ImportError:
            return False

    @classmethod
    def get_required_packages(cls) -> list[str]:
        return ["google-cloud-iam"]

    def _do_create_identity(
        self,
        name: str,
        description: str,
        tenant_id: str,
        region: str | None,
        trust_config: TrustConfiguration | None,
        options: CreateOptions | None,
    ) -> str:
        trust_policy = self._compiler.compile(tenant_id, trust_config)

        if options is not None and not options.is_empty:
            logger.warning(
                f"Create options {options.to_dict()} are not supported for GCP "
                f"service accounts and were ignored"
            )

        request = iam_admin_v1.CreateServiceAccountRequest(
            name=f"projects/{tenant_id}",
            account_id=name,
            service_account=iam_admin_v1.ServiceAccount(
                display_name=name,
                description=description,
            ),
        )
        logger.debug(f"Creating service account {name} in project {tenant_id}")
        account = self._client.create_service_account(request=request)

        if trust_policy is not None:
            self._set_trust_policy(account.name, trust_policy)

        return account.email

    def _set_trust_policy(self, resource: str, trust_policy: dict[str, Any]) -> None:
        policy = policy_pb2.Policy(
            bindings=[
                policy_pb2.Binding(role=binding["role"], members=binding["members"])
                for binding in trust_policy["bindings"]
            ]
        )
        logger.debug(f"Setting trust policy on {resource}")
        self._client.set_iam_policy(
            request=iam_policy_pb2.SetIamPolicyRequest(resource=resource, policy=policy)
        )

    def _do_get_identity(self, name: str, tenant_id: str, region: str | None) -> str | None:
        request = iam_admin_v1.GetServiceAccountRequest(
            name=service_account_resource(name, tenant_id)
        )
        logger.debug(f"Getting service account {name} in project {tenant_id}")
        account = self._client.get_service_account(request=request)
        return account.email

    def _do_delete_identity(self, name: str, tenant_id: str, region: str | None) -> None:
        request = iam_admin_v1.DeleteServiceAccountRequest(
            name=service_account_resource(name, tenant_id)
        )
        logger.debug(f"Deleting service account {name} in project {tenant_id}")
        self._client.delete_service_account(request=request)

    def _map_provider_exception(self, exc: BaseException) -> type[IamError]:
        if isinstance(exc, GoogleAPICallError):
            status = exc.grpc_status_code
            if status is not None:
                return GCP_STATUS_CODES.get(status.name, UnknownError)
            return GCP_HTTP_CODES.get(exc.code, UnknownError)
        if isinstance(exc, (GoogleAuthError, ValueError)):
            return InvalidArgumentError
        return UnknownError

    def close(self) -> None:
        """Close the transport of a client this driver built."""
        if self._owns_client:
            self._client.transport.close()
