"""
Trust-policy compilation for IAMKit.

Compilers turn a provider-neutral TrustConfiguration into the document
each provider attaches to a new identity:

- AWS: an AssumeRolePolicyDocument (AWSTrustPolicyCompiler)
- GCP: a service-account IAM policy (GCPTrustPolicyCompiler)
"""

from iamkit.trust.base import PrincipalBucket, TrustPolicyCompiler
from iamkit.trust.aws import ASSUME_ROLE_ACTION, AWSTrustPolicyCompiler
from iamkit.trust.gcp import TOKEN_CREATOR_ROLE, GCPTrustPolicyCompiler

__all__ = [
    "PrincipalBucket",
    "TrustPolicyCompiler",
    "ASSUME_ROLE_ACTION",
    "AWSTrustPolicyCompiler",
    "TOKEN_CREATOR_ROLE",
    "GCPTrustPolicyCompiler",
]
