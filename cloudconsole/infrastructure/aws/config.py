"""
Backend configuration shared by all service clients.

Every client (S3, Lambda, SQS, SNS) talks to the same emulator endpoint
with the same credentials, so the connection details live in one
immutable record built once at startup.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when a call to the emulated cloud API fails."""
    pass


@dataclass(frozen=True)
class AwsConfig:
    """
    Connection details for the emulated cloud API.

    Frozen because configuration is read once at startup and never
    changes while the process runs.
    """
    access_key_id: str
    secret_access_key: str
    endpoint_url: str
    region: str = "us-east-1"
    force_path_style: bool = True
    connect_timeout: Optional[float] = None
    read_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.endpoint_url:
            raise ValueError("endpoint_url is required")

    def botocore_config(self, service_name: str) -> Config:
        """Build the botocore Config for one service client."""
        options: dict[str, Any] = {}
        if service_name == "s3":
            options["signature_version"] = "s3v4"
            if self.force_path_style:
                # Emulators serve every bucket from one host
                options["s3"] = {"addressing_style": "path"}
        if self.connect_timeout is not None:
            options["connect_timeout"] = self.connect_timeout
        if self.read_timeout is not None:
            options["read_timeout"] = self.read_timeout
        return Config(**options)


def create_boto_client(service_name: str, config: AwsConfig) -> Any:
    """Create a low-level boto3 client for service_name against the emulator."""
    client = boto3.client(
        service_name,
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        region_name=config.region,
        config=config.botocore_config(service_name),
    )

    logger.debug(
        "Created boto3 client",
        extra={"service": service_name, "endpoint": config.endpoint_url}
    )

    return client
