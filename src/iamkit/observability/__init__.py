"""
Observability for IAMKit.

Provides structured logging for identity lifecycle operations.
"""

from iamkit.observability.logging import (
    HumanReadableFormatter,
    IamLogger,
    StructuredFormatter,
    configure_logging,
    configure_logging_from_env,
    get_logger,
)

__all__ = [
    "HumanReadableFormatter",
    "IamLogger",
    "StructuredFormatter",
    "configure_logging",
    "configure_logging_from_env",
    "get_logger",
]
