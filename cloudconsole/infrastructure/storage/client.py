"""
Object storage client for the emulated S3 API.

Talks to LocalStack (or any S3-compatible emulator) through boto3 with
path-style addressing, with a mock mode for local development.

Mock mode keeps buckets and objects in memory, enabling API testing
without running an emulator.
"""

import asyncio
import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from ...core.objects import Bucket, StoredObject
from ..aws.config import AwsConfig, BackendError, create_boto_client

logger = logging.getLogger(__name__)

# S3 returns at most this many keys per ListObjects page.
DEFAULT_PAGE_SIZE = 1000


class StorageError(BackendError):
    """Raised when storage operations fail."""
    pass


class StorageClient(Protocol):
    """
    Protocol for object storage operations.

    Using a protocol means tests can provide mocks and we can
    swap storage backends without changing dependent code.
    """

    async def list_buckets(self) -> list[Bucket]:
        """List every bucket."""
        ...

    async def create_bucket(self, bucket_name: str) -> None:
        """Create a bucket. Name validation is left to the backend."""
        ...

    async def delete_bucket(self, bucket_name: str) -> None:
        """Delete a bucket. Emptiness rules are the backend's."""
        ...

    async def list_objects(self, bucket_name: str) -> list[StoredObject]:
        """List the first page of objects in a bucket."""
        ...

    async def put_object(
        self,
        bucket_name: str,
        key: str,
        body: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """Store body under key, replacing any existing object."""
        ...

    async def delete_object(self, bucket_name: str, key: str) -> None:
        """Delete the object stored under key."""
        ...


class S3StorageClient:
    """
    Emulated S3 storage client.

    Uses boto3 against the emulator endpoint. boto3 is synchronous, so
    every call runs in a worker thread and the event loop stays free
    while the backend answers.
    """

    def __init__(self, config: AwsConfig, client: Any = None) -> None:
        """
        Initialize the S3 client.

        A prebuilt boto3 client can be passed in for tests; otherwise
        one is created from config.
        """
        self._config = config
        self._s3_client = client if client is not None else create_boto_client("s3", config)

        logger.info(
            "Initialized S3 storage client",
            extra={
                "endpoint": config.endpoint_url,
                "region": config.region,
                "path_style": config.force_path_style,
            }
        )

    async def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        """Run one boto3 operation off the event loop, wrapping failures."""
        method = getattr(self._s3_client, operation)
        try:
            return await asyncio.to_thread(method, **params)
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "S3 operation failed",
                extra={
                    "operation": operation,
                    "bucket": params.get("Bucket"),
                    "key": params.get("Key"),
                    "error": str(e),
                }
            )
            raise StorageError(f"{operation} failed: {e}") from e

    async def list_buckets(self) -> list[Bucket]:
        response = await self._call("list_buckets")

        return [
            Bucket(name=item["Name"], creation_date=item.get("CreationDate"))
            for item in response.get("Buckets", [])
        ]

    async def create_bucket(self, bucket_name: str) -> None:
        """
        Create a bucket.

        Outside us-east-1, S3 wants the region repeated as a location
        constraint; the emulator enforces the same rule.
        """
        params: dict[str, Any] = {"Bucket": bucket_name}
        if self._config.region != "us-east-1":
            params["CreateBucketConfiguration"] = {
                "LocationConstraint": self._config.region,
            }

        await self._call("create_bucket", **params)

        logger.info("Created bucket", extra={"bucket": bucket_name})

    async def delete_bucket(self, bucket_name: str) -> None:
        await self._call("delete_bucket", Bucket=bucket_name)

        logger.info("Deleted bucket", extra={"bucket": bucket_name})

    async def list_objects(self, bucket_name: str) -> list[StoredObject]:
        """
        List objects in a bucket.

        Only the first page is returned. Continuation tokens are not
        followed, so very large buckets are truncated at the page limit.
        """
        response = await self._call("list_objects_v2", Bucket=bucket_name)

        if response.get("IsTruncated"):
            logger.warning(
                "Object listing truncated to first page",
                extra={"bucket": bucket_name, "count": response.get("KeyCount")}
            )

        return [
            StoredObject(
                key=item["Key"],
                size=item.get("Size", 0),
                last_modified=item["LastModified"],
                etag=item.get("ETag"),
                storage_class=item.get("StorageClass"),
            )
            for item in response.get("Contents") or []
        ]

    async def put_object(
        self,
        bucket_name: str,
        key: str,
        body: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """
        Upload an object.

        The key is used verbatim; an existing object with the same key
        is replaced, which is S3's native behaviour.
        """
        params: dict[str, Any] = {
            "Bucket": bucket_name,
            "Key": key,
            "Body": body,
        }
        if content_type:
            params["ContentType"] = content_type

        await self._call("put_object", **params)

        logger.info(
            "Uploaded object",
            extra={"bucket": bucket_name, "key": key, "size_bytes": len(body)}
        )

    async def delete_object(self, bucket_name: str, key: str) -> None:
        await self._call("delete_object", Bucket=bucket_name, Key=key)

        logger.info("Deleted object", extra={"bucket": bucket_name, "key": key})


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

@dataclass
class _MockObject:
    body: bytes
    content_type: Optional[str]
    last_modified: datetime

    @property
    def etag(self) -> str:
        return f'"{hashlib.md5(self.body).hexdigest()}"'


@dataclass
class _MockBucket:
    creation_date: datetime
    objects: dict[str, _MockObject] = field(default_factory=dict)


class MockStorageClient:
    """
    In-memory storage for local development.

    Follows the S3 rules the gateway relies on: duplicate bucket names
    and deleting non-empty or missing buckets fail, uploads overwrite,
    deleting a missing key succeeds, and listings are one page long.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._buckets: dict[str, _MockBucket] = {}
        self._page_size = page_size
        logger.info("Initialized mock storage client (in-memory)")

    def _get_bucket(self, bucket_name: str) -> _MockBucket:
        if bucket_name not in self._buckets:
            raise StorageError(f"NoSuchBucket: {bucket_name}")
        return self._buckets[bucket_name]

    def get_object(self, bucket_name: str, key: str) -> tuple[bytes, Optional[str]]:
        """Return stored body and content type. Test helper, not part of the protocol."""
        obj = self._get_bucket(bucket_name).objects.get(key)
        if obj is None:
            raise StorageError(f"NoSuchKey: {key}")
        return obj.body, obj.content_type

    async def list_buckets(self) -> list[Bucket]:
        return [
            Bucket(name=name, creation_date=bucket.creation_date)
            for name, bucket in sorted(self._buckets.items())
        ]

    async def create_bucket(self, bucket_name: str) -> None:
        if not bucket_name:
            raise StorageError("InvalidBucketName: bucket name is empty")
        if bucket_name in self._buckets:
            raise StorageError(f"BucketAlreadyOwnedByYou: {bucket_name}")

        self._buckets[bucket_name] = _MockBucket(creation_date=datetime.now(timezone.utc))
        logger.debug("Created bucket in mock storage", extra={"bucket": bucket_name})

    async def delete_bucket(self, bucket_name: str) -> None:
        bucket = self._get_bucket(bucket_name)
        if bucket.objects:
            raise StorageError(f"BucketNotEmpty: {bucket_name}")

        del self._buckets[bucket_name]
        logger.debug("Deleted bucket from mock storage", extra={"bucket": bucket_name})

    async def list_objects(self, bucket_name: str) -> list[StoredObject]:
        bucket = self._get_bucket(bucket_name)

        # S3 orders keys by their UTF-8 bytes
        keys = sorted(bucket.objects, key=lambda k: k.encode("utf-8"))[: self._page_size]

        return [
            StoredObject(
                key=key,
                size=len(bucket.objects[key].body),
                last_modified=bucket.objects[key].last_modified,
                etag=bucket.objects[key].etag,
                storage_class="STANDARD",
            )
            for key in keys
        ]

    async def put_object(
        self,
        bucket_name: str,
        key: str,
        body: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        bucket = self._get_bucket(bucket_name)
        bucket.objects[key] = _MockObject(
            body=body,
            content_type=content_type,
            last_modified=datetime.now(timezone.utc),
        )

        logger.debug(
            "Stored object in mock storage",
            extra={"bucket": bucket_name, "key": key, "size_bytes": len(body)}
        )

    async def delete_object(self, bucket_name: str, key: str) -> None:
        bucket = self._get_bucket(bucket_name)
        bucket.objects.pop(key, None)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[AwsConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Backend configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (S3 or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return S3StorageClient(config)
