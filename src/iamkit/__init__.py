"""
IAMKit - Provider-neutral cloud identity management

Create, look up and delete cloud identities (AWS IAM roles, GCP service
accounts) and describe who may assume them, without branching on the
cloud the code runs against.

Key Features:
- One driver contract, one implementation per cloud
- Trust configurations compiled to each provider's trust document
- Idempotent creation: creating an existing identity returns it
- Canonical errors: callers never handle vendor exception types

Quick Start:
    >>> from iamkit import IdentityClient, TrustConfiguration
    >>>
    >>> with IdentityClient.create("aws") as iam:
    ...     arn = iam.create_identity(
    ...         "MyRole",
    ...         "Application role",
    ...         tenant_id="123456789012",
    ...         region=None,
    ...         trust_config=TrustConfiguration(("lambda.amazonaws.com",)),
    ...     )
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"
__author__ = "Mantissa"

# Core models
from iamkit.models import (
    CreateOptions,
    PolicyDocument,
    Statement,
    TrustConfiguration,
    EFFECT_ALLOW,
    EFFECT_DENY,
)

# Errors
from iamkit.errors import (
    ErrorKind,
    IamError,
    InvalidArgumentError,
    ConfigurationError,
    ResourceNotFoundError,
    ResourceAlreadyExistsError,
    ResourceConflictError,
    FailedPreconditionError,
    PermissionDeniedError,
    AuthenticationError,
    ResourceExhaustedError,
    DeadlineExceededError,
    UnsupportedOperationError,
    UnknownError,
)

# Configuration
from iamkit.config import (
    CloudCredentials,
    DriverConfig,
    load_config_from_env,
)

# Trust compilation
from iamkit.trust import (
    AWSTrustPolicyCompiler,
    GCPTrustPolicyCompiler,
    PrincipalBucket,
)

# Drivers
from iamkit.drivers import (
    IdentityDriver,
    AWSIdentityDriver,
    GCPIdentityDriver,
    get_driver,
    list_providers,
)

# Facade
from iamkit.client import IdentityClient

logging.getLogger("iamkit").addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Models
    "CreateOptions",
    "PolicyDocument",
    "Statement",
    "TrustConfiguration",
    "EFFECT_ALLOW",
    "EFFECT_DENY",
    # Errors
    "ErrorKind",
    "IamError",
    "InvalidArgumentError",
    "ConfigurationError",
    "ResourceNotFoundError",
    "ResourceAlreadyExistsError",
    "ResourceConflictError",
    "FailedPreconditionError",
    "PermissionDeniedError",
    "AuthenticationError",
    "ResourceExhaustedError",
    "DeadlineExceededError",
    "UnsupportedOperationError",
    "UnknownError",
    # Configuration
    "CloudCredentials",
    "DriverConfig",
    "load_config_from_env",
    # Trust
    "AWSTrustPolicyCompiler",
    "GCPTrustPolicyCompiler",
    "PrincipalBucket",
    # Drivers
    "IdentityDriver",
    "AWSIdentityDriver",
    "GCPIdentityDriver",
    "get_driver",
    "list_providers",
    # Facade
    "IdentityClient",
]
