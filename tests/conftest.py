"""
Shared fixtures.

API tests run against an app built with the in-memory backend, so no
emulator is needed. Each test gets a fresh app and therefore a fresh,
empty backend.
"""

from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from cloudconsole.config.settings import Settings
from cloudconsole.core.objects import Bucket, StoredObject
from cloudconsole.infrastructure.storage.client import MockStorageClient, StorageError
from cloudconsole.main import create_app


class FailingStorageClient:
    """Storage client whose every call fails like an unreachable backend."""

    async def _fail(self, *args: Any, **kwargs: Any) -> Any:
        raise StorageError("Could not connect to the endpoint URL")

    list_buckets = _fail
    create_bucket = _fail
    delete_bucket = _fail
    list_objects = _fail
    put_object = _fail
    delete_object = _fail


class RecordingStorageClient(MockStorageClient):
    """Mock storage that remembers which operations were called."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, tuple]] = []

    async def list_buckets(self) -> list[Bucket]:
        self.calls.append(("list_buckets", ()))
        return await super().list_buckets()

    async def list_objects(self, bucket_name: str) -> list[StoredObject]:
        self.calls.append(("list_objects", (bucket_name,)))
        return await super().list_objects(bucket_name)

    async def put_object(
        self,
        bucket_name: str,
        key: str,
        body: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        self.calls.append(("put_object", (bucket_name, key)))
        await super().put_object(bucket_name, key, body, content_type)

    async def delete_object(self, bucket_name: str, key: str) -> None:
        self.calls.append(("delete_object", (bucket_name, key)))
        await super().delete_object(bucket_name, key)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Mock-mode settings that ignore any local .env file."""
    return Settings(
        _env_file=None,
        backend_mock_mode=True,
        aws_endpoint="http://localhost:4566",
        static_dir=str(tmp_path / "no-static"),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def backend(app):
    """The in-memory clients behind the app under test."""
    return app.state.backend


@pytest.fixture
def storage(backend) -> MockStorageClient:
    return backend.storage


@pytest.fixture
def failing_storage() -> FailingStorageClient:
    return FailingStorageClient()


@pytest.fixture
def recording_storage() -> RecordingStorageClient:
    return RecordingStorageClient()
