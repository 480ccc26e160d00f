"""
FastAPI dependency injection.

Dependencies provide service clients and configuration to route
handlers. The clients are built once, when the application is created,
from an explicit AwsConfig, and stored on app.state. Route handlers
receive them through Depends instead of reaching for module globals,
which means:
- Routes don't instantiate their own clients (easier to test)
- Each app instance carries its own backend (tests get a fresh one)
- Configuration is read once and never mutated afterwards
"""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..infrastructure.aws.config import AwsConfig
from ..infrastructure.compute.client import FunctionClient, create_function_client
from ..infrastructure.messaging.client import (
    QueueClient,
    TopicClient,
    create_queue_client,
    create_topic_client,
)
from ..infrastructure.storage.client import StorageClient, create_storage_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendClients:
    """Every client the gateway talks to, sharing one AwsConfig."""
    config: AwsConfig
    storage: StorageClient
    functions: FunctionClient
    queues: QueueClient
    topics: TopicClient


def build_aws_config(settings: Settings) -> AwsConfig:
    """Translate settings into the immutable backend configuration."""
    return AwsConfig(
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        endpoint_url=settings.aws_endpoint,
        region=settings.aws_region,
        force_path_style=True,
        connect_timeout=settings.backend_connect_timeout,
        read_timeout=settings.backend_read_timeout,
    )


def create_backend_clients(settings: Settings) -> BackendClients:
    """
    Build all service clients.

    Returns in-memory mocks when backend_mock_mode is set, boto3 clients
    pointed at the emulator otherwise.
    """
    config = build_aws_config(settings)
    mock_mode = settings.backend_mock_mode

    clients = BackendClients(
        config=config,
        storage=create_storage_client(config=config, mock_mode=mock_mode),
        functions=create_function_client(config=config, mock_mode=mock_mode),
        queues=create_queue_client(config=config, mock_mode=mock_mode),
        topics=create_topic_client(config=config, mock_mode=mock_mode),
    )

    logger.info(
        "Created backend clients",
        extra={"endpoint": config.endpoint_url, "mock_mode": mock_mode}
    )

    return clients


# ---------------------------------------------------------------------------
# Request-scoped accessors
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_backend(request: Request) -> BackendClients:
    return request.app.state.backend


def get_storage_client(
    backend: Annotated[BackendClients, Depends(get_backend)],
) -> StorageClient:
    return backend.storage


def get_function_client(
    backend: Annotated[BackendClients, Depends(get_backend)],
) -> FunctionClient:
    return backend.functions


def get_queue_client(
    backend: Annotated[BackendClients, Depends(get_backend)],
) -> QueueClient:
    return backend.queues


def get_topic_client(
    backend: Annotated[BackendClients, Depends(get_backend)],
) -> TopicClient:
    return backend.topics


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
FunctionClientDep = Annotated[FunctionClient, Depends(get_function_client)]
QueueClientDep = Annotated[QueueClient, Depends(get_queue_client)]
TopicClientDep = Annotated[TopicClient, Depends(get_topic_client)]
BackendDep = Annotated[BackendClients, Depends(get_backend)]
