"""
Access policy documents for IAMKit.

PolicyDocument and Statement are the canonical representation of an
access policy attached to an identity. They serialize to the same JSON
shape as trust documents: one element collapses to a scalar, two or
more stay a list.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any

from iamkit.errors import IamError, InvalidArgumentError

# Statement effects
EFFECT_ALLOW = "Allow"
EFFECT_DENY = "Deny"

DEFAULT_POLICY_VERSION = "2012-10-17"


def scalar_or_list(values: list[Any] | tuple[Any, ...]) -> Any:
    """Collapse a single-element sequence to its element."""
    if len(values) == 1:
        return values[0]
    return list(values)


def _as_tuple(value: Any) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


@dataclass(frozen=True)
class Statement:
    """
    A single policy statement.

    Attributes:
        effect: "Allow" or "Deny"
        actions: Ordered actions the statement covers
        resources: Ordered resources, empty when not scoped
        sid: Optional statement identifier
        conditions: Condition operator -> condition key -> value
    """

    effect: str = EFFECT_ALLOW
    actions: tuple[str, ...] = ()
    resources: tuple[str, ...] = ()
    sid: str | None = None
    conditions: dict[str, dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", _as_tuple(self.actions))
        object.__setattr__(self, "resources", _as_tuple(self.resources))
        object.__setattr__(self, "conditions", copy.deepcopy(dict(self.conditions or {})))

    def to_dict(self) -> dict[str, Any]:
        """Convert to provider JSON shape."""
        result: dict[str, Any] = {}
        if self.sid:
            result["Sid"] = self.sid
        result["Effect"] = self.effect
        result["Action"] = scalar_or_list(self.actions)
        if self.resources:
            result["Resource"] = scalar_or_list(self.resources)
        if self.conditions:
            result["Condition"] = copy.deepcopy(self.conditions)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Statement:
        """Create from provider JSON shape."""
        return cls(
            effect=data.get("Effect", EFFECT_ALLOW),
            actions=_as_tuple(data.get("Action")),
            resources=_as_tuple(data.get("Resource")),
            sid=data.get("Sid"),
            conditions=data.get("Condition", {}),
        )


@dataclass(frozen=True)
class PolicyDocument:
    """
    An access policy: a version tag and ordered statements.

    Attributes:
        version: Policy language version
        statements: Ordered statements
    """

    version: str = DEFAULT_POLICY_VERSION
    statements: tuple[Statement, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "statements", tuple(self.statements))

    def to_dict(self) -> dict[str, Any]:
        """Convert to provider JSON shape."""
        return {
            "Version": self.version,
            "Statement": [s.to_dict() for s in self.statements],
        }

    def to_json(self) -> str:
        """
        Serialize to compact JSON with stable key order.

        Raises:
            IamError: If a condition value cannot be serialized
        """
        try:
            return json.dumps(self.to_dict(), separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise IamError(f"Failed to serialize policy document: {e}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyDocument:
        """Create from provider JSON shape."""
        statements = data.get("Statement", [])
        if isinstance(statements, dict):
            statements = [statements]
        return cls(
            version=data.get("Version", DEFAULT_POLICY_VERSION),
            statements=tuple(Statement.from_dict(s) for s in statements),
        )

    @classmethod
    def from_json(cls, document: str) -> PolicyDocument:
        """
        Parse a JSON policy document.

        Raises:
            InvalidArgumentError: If the document is not a JSON object
        """
        try:
            data = json.loads(document)
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid policy document: {e}") from e
        if not isinstance(data, dict):
            raise InvalidArgumentError("Invalid policy document: expected a JSON object")
        return cls.from_dict(data)
