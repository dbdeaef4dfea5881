"""
Canonical error taxonomy for IAMKit.

Every driver surfaces failures as one of the exceptions defined here,
whatever the underlying cloud SDK raised. Callers can therefore handle
errors uniformly without importing botocore or google-api-core.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Provider-independent failure categories."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    CONFLICT = "conflict"
    FAILED_PRECONDITION = "failed_precondition"
    PERMISSION_DENIED = "permission_denied"
    UNAUTHENTICATED = "unauthenticated"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


class IamError(Exception):
    """
    Base exception for IAMKit errors.

    The bare base class is the generic kind: a mapper never passes it
    through unchanged and maps it to UnknownError instead.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN


class InvalidArgumentError(IamError):
    """Raised for malformed input or client-side construction failures."""

    kind = ErrorKind.INVALID_ARGUMENT


class ConfigurationError(InvalidArgumentError):
    """Raised when driver configuration is invalid."""

    pass


class ResourceNotFoundError(IamError):
    """Raised when the lookup or delete target does not exist."""

    kind = ErrorKind.NOT_FOUND


class ResourceAlreadyExistsError(IamError):
    """Raised when an identity with the same name already exists."""

    kind = ErrorKind.ALREADY_EXISTS


class ResourceConflictError(IamError):
    """Raised when a concurrent modification conflicts with the request."""

    kind = ErrorKind.CONFLICT


class FailedPreconditionError(IamError):
    """Raised when the resource is not in a state that permits the request."""

    kind = ErrorKind.FAILED_PRECONDITION


class PermissionDeniedError(IamError):
    """Raised when permission is denied."""

    kind = ErrorKind.PERMISSION_DENIED


class AuthenticationError(IamError):
    """Raised when authentication fails."""

    kind = ErrorKind.UNAUTHENTICATED


class ResourceExhaustedError(IamError):
    """Raised on quota, limit or throttling failures."""

    kind = ErrorKind.RESOURCE_EXHAUSTED


class DeadlineExceededError(IamError):
    """Raised when the provider timed out."""

    kind = ErrorKind.DEADLINE_EXCEEDED


class UnsupportedOperationError(IamError):
    """Raised when a driver does not implement an operation."""

    kind = ErrorKind.UNSUPPORTED


class UnknownError(IamError):
    """Raised for unrecognized provider failures."""

    kind = ErrorKind.UNKNOWN


_ERRORS_BY_KIND: dict[ErrorKind, type[IamError]] = {
    ErrorKind.INVALID_ARGUMENT: InvalidArgumentError,
    ErrorKind.NOT_FOUND: ResourceNotFoundError,
    ErrorKind.ALREADY_EXISTS: ResourceAlreadyExistsError,
    ErrorKind.CONFLICT: ResourceConflictError,
    ErrorKind.FAILED_PRECONDITION: FailedPreconditionError,
    ErrorKind.PERMISSION_DENIED: PermissionDeniedError,
    ErrorKind.UNAUTHENTICATED: AuthenticationError,
    ErrorKind.RESOURCE_EXHAUSTED: ResourceExhaustedError,
    ErrorKind.DEADLINE_EXCEEDED: DeadlineExceededError,
    ErrorKind.UNSUPPORTED: UnsupportedOperationError,
    ErrorKind.UNKNOWN: UnknownError,
}


def error_for_kind(kind: ErrorKind) -> type[IamError]:
    """Return the exception class raised for a canonical error kind."""
    return _ERRORS_BY_KIND[kind]


def is_canonical(exc: BaseException) -> bool:
    """
    Check whether an exception is already a precise canonical error.

    Args:
        exc: Exception to inspect

    Returns:
        True for IamError subclasses, False for the bare IamError base
        and for anything raised outside IAMKit.
    """
    return isinstance(exc, IamError) and type(exc) is not IamError
