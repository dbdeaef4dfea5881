"""
Trust configuration and creation options for IAMKit.

This module defines the provider-neutral values a caller passes to
create_identity: who may assume the identity, under which conditions,
and the optional provider settings applied at creation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def _frozen(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _frozen(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_frozen(v) for v in value)
    return value


def _thawed(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thawed(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thawed(v) for v in value]
    return value


def _hash_key(value: Any) -> Any:
    if isinstance(value, Mapping):
        return frozenset((k, _hash_key(v)) for k, v in value.items())
    if isinstance(value, tuple):
        return tuple(_hash_key(v) for v in value)
    return value


@dataclass(frozen=True)
class TrustConfiguration:
    """
    Describes which principals may assume an identity.

    Principals are raw strings (ARNs, account IDs, service names,
    e-mail addresses) classified by the provider's trust compiler.
    Their order is preserved so compiled documents are deterministic.
    Conditions are stored as read-only mappings; use
    conditions_to_dict() for a mutable copy.

    Attributes:
        trusted_principals: Principals allowed to assume the identity
        conditions: Condition operator -> condition key -> value
    """

    trusted_principals: tuple[str, ...] = ()
    conditions: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        principals = self.trusted_principals
        if isinstance(principals, str):
            principals = (principals,)
        object.__setattr__(self, "trusted_principals", tuple(principals))
        object.__setattr__(self, "conditions", _frozen(self.conditions or {}))

    def __hash__(self) -> int:
        return hash((self.trusted_principals, _hash_key(self.conditions)))

    @property
    def has_principals(self) -> bool:
        """Check if any non-blank principal is configured."""
        return any(p and p.strip() for p in self.trusted_principals)

    @property
    def has_conditions(self) -> bool:
        """Check if any condition is configured."""
        return len(self.conditions) > 0

    def conditions_to_dict(self) -> dict[str, dict[str, Any]]:
        """Return a mutable copy of the conditions."""
        return _thawed(self.conditions)

    def with_principal(self, principal: str) -> TrustConfiguration:
        """Return a copy with one more trusted principal appended."""
        return TrustConfiguration(
            trusted_principals=self.trusted_principals + (principal,),
            conditions=self.conditions,
        )

    def with_condition(self, operator: str, key: str, value: Any) -> TrustConfiguration:
        """
        Return a copy with a condition added.

        Args:
            operator: Condition operator (e.g., "StringEquals")
            key: Condition key (e.g., "sts:ExternalId")
            value: Condition value, used verbatim

        Returns:
            New TrustConfiguration
        """
        conditions = self.conditions_to_dict()
        conditions.setdefault(operator, {})[key] = value
        return TrustConfiguration(
            trusted_principals=self.trusted_principals,
            conditions=conditions,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "trusted_principals": list(self.trusted_principals),
            "conditions": self.conditions_to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrustConfiguration:
        """Create from dictionary."""
        return cls(
            trusted_principals=data.get("trusted_principals", ()),
            conditions=data.get("conditions", {}),
        )


@dataclass(frozen=True)
class CreateOptions:
    """
    Optional provider settings applied when an identity is created.

    None means "use the provider default"; it never means "set to empty".

    Attributes:
        path: IAM path or namespace (e.g., "/service-roles/")
        max_session_duration: Maximum session duration in seconds
        permission_boundary: Reference to a permissions boundary policy
    """

    path: str | None = None
    max_session_duration: int | None = None
    permission_boundary: str | None = None

    @property
    def is_empty(self) -> bool:
        """Check if no option is set."""
        return (
            not self.path
            and self.max_session_duration is None
            and not self.permission_boundary
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting unset fields."""
        result: dict[str, Any] = {}
        if self.path is not None:
            result["path"] = self.path
        if self.max_session_duration is not None:
            result["max_session_duration"] = self.max_session_duration
        if self.permission_boundary is not None:
            result["permission_boundary"] = self.permission_boundary
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CreateOptions:
        """Create from dictionary."""
        return cls(
            path=data.get("path"),
            max_session_duration=data.get("max_session_duration"),
            permission_boundary=data.get("permission_boundary"),
        )
