"""
Data models for IAMKit.

This package provides the provider-neutral values used throughout IAMKit:

- TrustConfiguration: Who may assume an identity, with optional conditions
- CreateOptions: Optional provider settings applied at creation
- PolicyDocument / Statement: Access policies attached to an identity
"""

from iamkit.models.policy import (
    DEFAULT_POLICY_VERSION,
    EFFECT_ALLOW,
    EFFECT_DENY,
    PolicyDocument,
    Statement,
    scalar_or_list,
)
from iamkit.models.trust import (
    CreateOptions,
    TrustConfiguration,
)

__all__ = [
    # Trust module
    "CreateOptions",
    "TrustConfiguration",
    # Policy module
    "DEFAULT_POLICY_VERSION",
    "EFFECT_ALLOW",
    "EFFECT_DENY",
    "PolicyDocument",
    "Statement",
    "scalar_or_list",
]
