"""
Function listing client for the emulated Lambda API.

The gateway only lists functions; descriptors are passed through
exactly as the backend reports them.
"""

import asyncio
import logging
from typing import Any, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from ..aws.config import AwsConfig, BackendError, create_boto_client

logger = logging.getLogger(__name__)


class FunctionError(BackendError):
    """Raised when Lambda operations fail."""
    pass


class FunctionClient(Protocol):
    """Protocol for function operations."""

    async def list_functions(self) -> list[dict[str, Any]]:
        """Return the first page of function descriptors."""
        ...


class LambdaFunctionClient:
    """Emulated Lambda client backed by boto3."""

    def __init__(self, config: AwsConfig, client: Any = None) -> None:
        self._lambda_client = client if client is not None else create_boto_client("lambda", config)
        logger.info("Initialized Lambda client", extra={"endpoint": config.endpoint_url})

    async def list_functions(self) -> list[dict[str, Any]]:
        try:
            response = await asyncio.to_thread(self._lambda_client.list_functions)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to list functions", extra={"error": str(e)})
            raise FunctionError(f"list_functions failed: {e}") from e

        return response.get("Functions") or []


class MockFunctionClient:
    """
    In-memory function registry for local development.

    The gateway never deploys functions, so the registry is only filled
    through add_function() (tests, demo data).
    """

    def __init__(self) -> None:
        self._functions: dict[str, dict[str, Any]] = {}
        logger.info("Initialized mock function client (in-memory)")

    def add_function(self, name: str, runtime: str = "python3.12", handler: str = "handler.main") -> None:
        self._functions[name] = {
            "FunctionName": name,
            "FunctionArn": f"arn:aws:lambda:us-east-1:000000000000:function:{name}",
            "Runtime": runtime,
            "Handler": handler,
        }

    async def list_functions(self) -> list[dict[str, Any]]:
        return [self._functions[name] for name in sorted(self._functions)]


def create_function_client(
    config: Optional[AwsConfig] = None,
    mock_mode: bool = False,
) -> FunctionClient:
    """Create function client based on configuration."""
    if mock_mode:
        return MockFunctionClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return LambdaFunctionClient(config)
