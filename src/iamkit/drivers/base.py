"""
Base class for identity drivers.

IdentityDriver defines the provider-neutral identity lifecycle. Public
methods are template methods: they apply defaults, absorb "already
exists" during creation, log, and translate provider failures into
canonical errors. Subclasses implement the _do_* hooks, which perform
one provider call each and raise whatever the provider SDK raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, NoReturn, TypeVar

from iamkit.config import DriverConfig
from iamkit.errors import (
    IamError,
    InvalidArgumentError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    UnknownError,
    UnsupportedOperationError,
    is_canonical,
)
from iamkit.models import CreateOptions, PolicyDocument, TrustConfiguration
from iamkit.observability import get_logger

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IdentityDriver(ABC):
    """
    Abstract base class for cloud identity drivers.

    Each cloud provider implements this interface once, owning a single
    provider client. Drivers hold no mutable state after construction,
    so one instance can be shared across threads.

    Attributes:
        provider_id: Provider name (aws, gcp)
    """

    provider_id: str = "base"

    def __init__(self, config: DriverConfig | None = None) -> None:
        """
        Initialize the driver.

        Args:
            config: Optional driver configuration. Defaults are resolved
                here, once, not per call.
        """
        self.config = config or DriverConfig(provider=self.provider_id)
        self._events = get_logger(f"drivers.{self.provider_id}")

    # Identity lifecycle

    def create_identity(
        self,
        name: str,
        description: str | None,
        tenant_id: str,
        region: str | None,
        trust_config: TrustConfiguration | None = None,
        options: CreateOptions | None = None,
    ) -> str:
        """
        Create an identity, or return the existing one with the same name.

        Args:
            name: Identity name; provider naming rules apply
            description: Optional description, empty string when None
            tenant_id: Account or project that owns the identity
            region: Region hint for the request
            trust_config: Optional principals allowed to assume the identity
            options: Optional provider settings

        Returns:
            Provider handle of the identity (role ARN, service account email)

        Raises:
            IamError: Canonical error for any failure other than
                "already exists"
        """
        description = description if description is not None else ""

        try:
            handle = self._do_create_identity(
                name, description, tenant_id, region, trust_config, options
            )
        except Exception as e:
            if not issubclass(self.map_exception(e), ResourceAlreadyExistsError):
                self._raise_mapped("create_identity", e)
            logger.debug(f"Create of {name} reported a conflict, fetching existing identity")
            handle = self.get_identity(name, tenant_id, region)
            self._events.identity_reused(self.provider_id, name, handle)
            return handle

        self._events.identity_created(self.provider_id, name, handle)
        return handle

    def get_identity(self, name: str, tenant_id: str, region: str | None) -> str:
        """
        Look up an identity by name.

        Args:
            name: Identity name
            tenant_id: Account or project that owns the identity
            region: Region hint for the request

        Returns:
            Provider handle of the identity

        Raises:
            ResourceNotFoundError: If the identity does not exist
        """
        handle = self._invoke(
            "get_identity", self._do_get_identity, name, tenant_id, region
        )
        if not handle:
            raise ResourceNotFoundError(f"Identity {name} not found")
        return handle

    def delete_identity(self, name: str, tenant_id: str, region: str | None) -> None:
        """
        Delete an identity.

        Attached policies are not detached first; a provider refusing
        the delete because of them surfaces as FailedPreconditionError.

        Args:
            name: Identity name
            tenant_id: Account or project that owns the identity
            region: Region hint for the request
        """
        self._invoke("delete_identity", self._do_delete_identity, name, tenant_id, region)
        self._events.identity_deleted(self.provider_id, name)

    # Policy attachment

    def attach_inline_policy(
        self,
        identity_name: str,
        policy_name: str,
        policy_document: PolicyDocument,
        tenant_id: str,
        region: str | None,
    ) -> None:
        """Attach (or replace) an inline policy on an identity."""
        self._invoke(
            "attach_inline_policy",
            self._do_attach_inline_policy,
            identity_name,
            policy_name,
            policy_document,
            tenant_id,
            region,
        )

    def get_inline_policy_details(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> str:
        """Return an inline policy document as JSON."""
        return self._invoke(
            "get_inline_policy_details",
            self._do_get_inline_policy_details,
            identity_name,
            policy_name,
            tenant_id,
            region,
        )

    def get_attached_policies(
        self,
        identity_name: str,
        tenant_id: str,
        region: str | None,
    ) -> list[str]:
        """List the policies attached to an identity."""
        return self._invoke(
            "get_attached_policies",
            self._do_get_attached_policies,
            identity_name,
            tenant_id,
            region,
        )

    def remove_policy(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> None:
        """Remove an inline policy from an identity."""
        self._invoke(
            "remove_policy",
            self._do_remove_policy,
            identity_name,
            policy_name,
            tenant_id,
            region,
        )

    # Error mapping

    def map_exception(self, exc: BaseException) -> type[IamError]:
        """
        Map any failure to a canonical exception class.

        Canonical IAMKit errors pass through unchanged; everything else
        goes through the provider's table. Never raises.

        Args:
            exc: Exception raised by a provider call or a driver

        Returns:
            Canonical IamError subclass
        """
        if is_canonical(exc):
            return type(exc)
        try:
            return self._map_provider_exception(exc)
        except Exception:
            logger.debug("Error mapping failed, falling back to UnknownError", exc_info=True)
            return UnknownError

    def _map_provider_exception(self, exc: BaseException) -> type[IamError]:
        """Map a non-canonical exception. Subclasses extend with SDK types."""
        if isinstance(exc, ValueError):
            return InvalidArgumentError
        return UnknownError

    def _raise_mapped(self, operation: str, exc: BaseException) -> NoReturn:
        """Re-raise exc as its canonical error, chained to the provider exception."""
        if is_canonical(exc):
            raise exc
        error_class = self.map_exception(exc)
        self._events.operation_failed(
            self.provider_id, operation, error_class.kind.value, str(exc)
        )
        raise error_class(str(exc)) from exc

    def _invoke(self, operation: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return func(*args)
        except Exception as e:
            self._raise_mapped(operation, e)

    # Provider hooks

    @abstractmethod
    def _do_create_identity(
        self,
        name: str,
        description: str,
        tenant_id: str,
        region: str | None,
        trust_config: TrustConfiguration | None,
        options: CreateOptions | None,
    ) -> str:
        """Issue the create call and return the new identity's handle."""
        pass

    @abstractmethod
    def _do_get_identity(self, name: str, tenant_id: str, region: str | None) -> str | None:
        """Issue the lookup call and return the identity's handle."""
        pass

    @abstractmethod
    def _do_delete_identity(self, name: str, tenant_id: str, region: str | None) -> None:
        """Issue the delete call."""
        pass

    def _do_attach_inline_policy(
        self,
        identity_name: str,
        policy_name: str,
        policy_document: PolicyDocument,
        tenant_id: str,
        region: str | None,
    ) -> None:
        raise UnsupportedOperationError(
            f"attach_inline_policy is not supported by the {self.provider_id} driver"
        )

    def _do_get_inline_policy_details(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> str:
        raise UnsupportedOperationError(
            f"get_inline_policy_details is not supported by the {self.provider_id} driver"
        )

    def _do_get_attached_policies(
        self,
        identity_name: str,
        tenant_id: str,
        region: str | None,
    ) -> list[str]:
        raise UnsupportedOperationError(
            f"get_attached_policies is not supported by the {self.provider_id} driver"
        )

    def _do_remove_policy(
        self,
        identity_name: str,
        policy_name: str,
        tenant_id: str,
        region: str | None,
    ) -> None:
        raise UnsupportedOperationError(
            f"remove_policy is not supported by the {self.provider_id} driver"
        )

    # Lifecycle

    @classmethod
    def is_available(cls) -> bool:
        """Check if this provider's SDK is installed."""
        return True

    @classmethod
    def get_required_packages(cls) -> list[str]:
        """Return the Python packages this provider needs."""
        return []

    def close(self) -> None:
        """Release the provider client."""
        pass

    def __enter__(self) -> IdentityDriver:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider_id})"
