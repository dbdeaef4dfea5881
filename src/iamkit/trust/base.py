"""
Base classes for trust-policy compilation.

A trust compiler turns a provider-neutral TrustConfiguration plus a
tenant identifier into the document a provider attaches to a new
identity. Compilers are pure: no I/O and no state between calls.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from iamkit.errors import IamError
from iamkit.models import TrustConfiguration


class PrincipalBucket(Enum):
    """Where a trusted principal lands in the compiled document."""

    DIRECT = "direct"
    SERVICE = "service"


class TrustPolicyCompiler(ABC):
    """
    Abstract base class for provider trust compilers.

    Subclasses classify principals and build the document;
    serialization is shared.
    """

    provider_name: str = "base"

    @abstractmethod
    def compile(
        self,
        tenant_id: str,
        trust_config: TrustConfiguration | None = None,
    ) -> dict[str, Any] | None:
        """
        Build the trust document.

        Args:
            tenant_id: Account or project that owns the identity
            trust_config: Optional trust configuration

        Returns:
            Document as a dictionary, or None if the provider needs no
            document for this configuration
        """
        pass

    def compile_json(
        self,
        tenant_id: str,
        trust_config: TrustConfiguration | None = None,
    ) -> str | None:
        """Build the trust document and serialize it."""
        document = self.compile(tenant_id, trust_config)
        if document is None:
            return None
        return self.serialize(document)

    @staticmethod
    def serialize(document: dict[str, Any]) -> str:
        """
        Serialize a document to compact JSON in insertion key order.

        Raises:
            IamError: If the document contains values JSON cannot encode
        """
        try:
            return json.dumps(document, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise IamError(f"Failed to serialize trust policy document: {e}") from e

    @staticmethod
    def iter_principals(trust_config: TrustConfiguration | None):
        """Yield the non-blank principals of a configuration in order."""
        if trust_config is None:
            return
        for principal in trust_config.trusted_principals:
            if principal is None or not principal.strip():
                continue
            yield principal
