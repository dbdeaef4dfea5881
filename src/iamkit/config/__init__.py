"""
Configuration for IAMKit.

Provides driver configuration (region, endpoint, partition) and the
credential override hook used when a driver builds its provider client.
"""

from iamkit.config.credentials import (
    CloudCredentials,
    aws_session,
    gcp_credentials,
)
from iamkit.config.driver_config import (
    AWS_GLOBAL_REGION,
    GCP_GLOBAL_REGION,
    DriverConfig,
    load_config_from_env,
)

__all__ = [
    "AWS_GLOBAL_REGION",
    "GCP_GLOBAL_REGION",
    "CloudCredentials",
    "DriverConfig",
    "aws_session",
    "gcp_credentials",
    "load_config_from_env",
]
