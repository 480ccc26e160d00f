"""
Unit tests for the storage clients.

S3StorageClient is exercised against a MagicMock standing in for the
boto3 client, so we can assert the exact SDK parameters. The real
boto3 client is only constructed to check its configuration; no
request is sent.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from cloudconsole.core.objects import StoredObject
from cloudconsole.infrastructure.aws.config import AwsConfig, BackendError, create_boto_client
from cloudconsole.infrastructure.storage.client import (
    MockStorageClient,
    S3StorageClient,
    StorageError,
    create_storage_client,
)

LAST_MODIFIED = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def config() -> AwsConfig:
    return AwsConfig(
        access_key_id="test",
        secret_access_key="test",
        endpoint_url="http://localhost:4566",
    )


@pytest.fixture
def boto_s3() -> MagicMock:
    return MagicMock()


@pytest.fixture
def s3_storage(config, boto_s3) -> S3StorageClient:
    return S3StorageClient(config, client=boto_s3)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestAwsConfig:

    def test_requires_endpoint(self):
        with pytest.raises(ValueError, match="endpoint_url"):
            AwsConfig(access_key_id="test", secret_access_key="test", endpoint_url="")

    def test_s3_client_uses_path_style_addressing(self, config):
        client = create_boto_client("s3", config)

        assert client.meta.config.s3["addressing_style"] == "path"
        assert client.meta.endpoint_url == "http://localhost:4566"
        assert client.meta.region_name == "us-east-1"

    def test_timeouts_are_forwarded(self):
        config = AwsConfig(
            access_key_id="test",
            secret_access_key="test",
            endpoint_url="http://localhost:4566",
            connect_timeout=3,
            read_timeout=10,
        )

        client = create_boto_client("s3", config)

        assert client.meta.config.connect_timeout == 3
        assert client.meta.config.read_timeout == 10

    def test_non_s3_services_get_no_addressing_style(self, config):
        assert config.botocore_config("sqs").s3 is None

    def test_is_immutable(self, config):
        with pytest.raises(AttributeError):
            config.region = "eu-west-1"


# ---------------------------------------------------------------------------
# S3StorageClient
# ---------------------------------------------------------------------------

class TestS3StorageClientBuckets:

    def test_list_buckets(self, s3_storage, boto_s3):
        boto_s3.list_buckets.return_value = {
            "Buckets": [
                {"Name": "photos", "CreationDate": LAST_MODIFIED},
                {"Name": "logs", "CreationDate": LAST_MODIFIED},
            ]
        }

        buckets = asyncio.run(s3_storage.list_buckets())

        assert [b.name for b in buckets] == ["photos", "logs"]
        assert buckets[0].creation_date == LAST_MODIFIED

    def test_create_bucket_in_us_east_1_has_no_location(self, s3_storage, boto_s3):
        asyncio.run(s3_storage.create_bucket("photos"))

        boto_s3.create_bucket.assert_called_once_with(Bucket="photos")

    def test_create_bucket_elsewhere_sends_location(self, boto_s3):
        config = AwsConfig(
            access_key_id="test",
            secret_access_key="test",
            endpoint_url="http://localhost:4566",
            region="eu-central-1",
        )
        storage = S3StorageClient(config, client=boto_s3)

        asyncio.run(storage.create_bucket("photos"))

        boto_s3.create_bucket.assert_called_once_with(
            Bucket="photos",
            CreateBucketConfiguration={"LocationConstraint": "eu-central-1"},
        )

    def test_delete_bucket_failure_is_wrapped(self, s3_storage, boto_s3):
        boto_s3.delete_bucket.side_effect = client_error("NoSuchBucket", "DeleteBucket")

        with pytest.raises(StorageError, match="NoSuchBucket"):
            asyncio.run(s3_storage.delete_bucket("missing"))

    def test_connection_failure_is_wrapped(self, s3_storage, boto_s3):
        boto_s3.list_buckets.side_effect = EndpointConnectionError(
            endpoint_url="http://localhost:4566"
        )

        with pytest.raises(StorageError) as excinfo:
            asyncio.run(s3_storage.list_buckets())

        assert isinstance(excinfo.value, BackendError)
        assert isinstance(excinfo.value.__cause__, EndpointConnectionError)


class TestS3StorageClientObjects:

    def test_list_objects_maps_entries(self, s3_storage, boto_s3):
        boto_s3.list_objects_v2.return_value = {
            "Contents": [
                {
                    "Key": "cafÃ©.txt",
                    "LastModified": LAST_MODIFIED,
                    "ETag": '"abc"',
                    "Size": 42,
                    "StorageClass": "STANDARD",
                }
            ],
            "KeyCount": 1,
            "IsTruncated": False,
        }

        objects = asyncio.run(s3_storage.list_objects("docs"))

        boto_s3.list_objects_v2.assert_called_once_with(Bucket="docs")
        assert objects == [
            StoredObject(
                key="cafÃ©.txt",
                size=42,
                last_modified=LAST_MODIFIED,
                etag='"abc"',
                storage_class="STANDARD",
            )
        ]
        assert objects[0].display_name == "café.txt"

    def test_missing_contents_is_empty_list(self, s3_storage, boto_s3):
        """An empty bucket has no Contents field at all."""
        boto_s3.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}

        assert asyncio.run(s3_storage.list_objects("empty")) == []

    def test_truncated_listing_returns_first_page_only(self, s3_storage, boto_s3):
        boto_s3.list_objects_v2.return_value = {
            "Contents": [{"Key": "a", "LastModified": LAST_MODIFIED, "Size": 1}],
            "IsTruncated": True,
            "NextContinuationToken": "token",
        }

        objects = asyncio.run(s3_storage.list_objects("big"))

        assert [o.key for o in objects] == ["a"]
        assert boto_s3.list_objects_v2.call_count == 1

    def test_put_object_forwards_key_and_content_type(self, s3_storage, boto_s3):
        asyncio.run(s3_storage.put_object(
            bucket_name="docs",
            key="My Report (v2).PDF",
            body=b"%PDF-1.7",
            content_type="application/x-anything",
        ))

        boto_s3.put_object.assert_called_once_with(
            Bucket="docs",
            Key="My Report (v2).PDF",
            Body=b"%PDF-1.7",
            ContentType="application/x-anything",
        )

    def test_put_object_without_content_type(self, s3_storage, boto_s3):
        asyncio.run(s3_storage.put_object("docs", "blob", b"data"))

        boto_s3.put_object.assert_called_once_with(Bucket="docs", Key="blob", Body=b"data")

    def test_delete_object_uses_literal_key(self, s3_storage, boto_s3):
        asyncio.run(s3_storage.delete_object("docs", "a/b/100%.txt"))

        boto_s3.delete_object.assert_called_once_with(Bucket="docs", Key="a/b/100%.txt")

    def test_upload_failure_is_wrapped(self, s3_storage, boto_s3):
        boto_s3.put_object.side_effect = client_error("AccessDenied", "PutObject")

        with pytest.raises(StorageError, match="AccessDenied"):
            asyncio.run(s3_storage.put_object("docs", "x", b"1"))


# ---------------------------------------------------------------------------
# MockStorageClient
# ---------------------------------------------------------------------------

class TestMockStorageClient:
    """The in-memory backend follows the S3 rules the gateway relies on."""

    def test_created_bucket_is_listed(self):
        storage = MockStorageClient()

        asyncio.run(storage.create_bucket("photos"))
        buckets = asyncio.run(storage.list_buckets())

        assert [b.name for b in buckets] == ["photos"]
        assert buckets[0].creation_date is not None

    def test_duplicate_bucket_fails(self):
        storage = MockStorageClient()
        asyncio.run(storage.create_bucket("photos"))

        with pytest.raises(StorageError):
            asyncio.run(storage.create_bucket("photos"))

    def test_delete_missing_bucket_fails(self):
        with pytest.raises(StorageError, match="NoSuchBucket"):
            asyncio.run(MockStorageClient().delete_bucket("missing"))

    def test_delete_non_empty_bucket_fails(self):
        storage = MockStorageClient()
        asyncio.run(storage.create_bucket("photos"))
        asyncio.run(storage.put_object("photos", "cat.jpg", b"meow"))

        with pytest.raises(StorageError, match="BucketNotEmpty"):
            asyncio.run(storage.delete_bucket("photos"))

    def test_put_overwrites_same_key(self):
        storage = MockStorageClient()
        asyncio.run(storage.create_bucket("docs"))

        asyncio.run(storage.put_object("docs", "a.txt", b"first", "text/plain"))
        asyncio.run(storage.put_object("docs", "a.txt", b"second!", "text/markdown"))
        objects = asyncio.run(storage.list_objects("docs"))

        assert len(objects) == 1
        assert objects[0].size == 7
        assert storage.get_object("docs", "a.txt") == (b"second!", "text/markdown")

    def test_listing_is_ordered_and_single_page(self):
        storage = MockStorageClient(page_size=2)
        asyncio.run(storage.create_bucket("docs"))
        for key in ["c", "a", "b"]:
            asyncio.run(storage.put_object("docs", key, b"x"))

        objects = asyncio.run(storage.list_objects("docs"))

        assert [o.key for o in objects] == ["a", "b"]

    def test_delete_missing_key_succeeds(self):
        storage = MockStorageClient()
        asyncio.run(storage.create_bucket("docs"))

        asyncio.run(storage.delete_object("docs", "never-uploaded"))

    def test_factory_requires_config_outside_mock_mode(self):
        with pytest.raises(ValueError):
            create_storage_client()

    def test_factory_returns_mock(self):
        assert isinstance(create_storage_client(mock_mode=True), MockStorageClient)
