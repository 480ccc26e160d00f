"""
Object storage integration for the emulated S3 API.

Includes mock mode for local development without an emulator.
"""

from .client import (
    MockStorageClient,
    S3StorageClient,
    StorageClient,
    StorageError,
    create_storage_client,
)

__all__ = [
    "MockStorageClient",
    "S3StorageClient",
    "StorageClient",
    "StorageError",
    "create_storage_client",
]
