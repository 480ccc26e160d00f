"""
Shared boto3 configuration for every emulated service.

One AwsConfig is built at startup and handed to each client factory.
"""

from .config import AwsConfig, BackendError, create_boto_client

__all__ = ["AwsConfig", "BackendError", "create_boto_client"]
