"""
Queue and topic clients for the emulated SQS and SNS APIs.

Listings are single-page passthroughs; absent result fields are
normalized to empty lists.
"""

import asyncio
import logging
from typing import Any, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from ..aws.config import AwsConfig, BackendError, create_boto_client

logger = logging.getLogger(__name__)

# LocalStack's default account; mock URLs and ARNs use it so they look familiar.
MOCK_ACCOUNT_ID = "000000000000"


class QueueError(BackendError):
    """Raised when SQS operations fail."""
    pass


class TopicError(BackendError):
    """Raised when SNS operations fail."""
    pass


class QueueClient(Protocol):
    """Protocol for queue operations."""

    async def list_queues(self) -> list[str]:
        """Return queue URLs."""
        ...

    async def create_queue(self, queue_name: str) -> str:
        """Create a queue and return its URL."""
        ...


class TopicClient(Protocol):
    """Protocol for notification topic operations."""

    async def list_topics(self) -> list[dict[str, Any]]:
        """Return topic descriptors ({"TopicArn": ...})."""
        ...

    async def create_topic(self, topic_name: str) -> str:
        """Create a topic and return its ARN."""
        ...


# ---------------------------------------------------------------------------
# SQS
# ---------------------------------------------------------------------------

class SqsQueueClient:
    """Emulated SQS client backed by boto3."""

    def __init__(self, config: AwsConfig, client: Any = None) -> None:
        self._sqs_client = client if client is not None else create_boto_client("sqs", config)
        logger.info("Initialized SQS client", extra={"endpoint": config.endpoint_url})

    async def list_queues(self) -> list[str]:
        try:
            response = await asyncio.to_thread(self._sqs_client.list_queues)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to list queues", extra={"error": str(e)})
            raise QueueError(f"list_queues failed: {e}") from e

        return response.get("QueueUrls") or []

    async def create_queue(self, queue_name: str) -> str:
        try:
            response = await asyncio.to_thread(
                self._sqs_client.create_queue,
                QueueName=queue_name,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to create queue",
                extra={"queue_name": queue_name, "error": str(e)}
            )
            raise QueueError(f"create_queue failed: {e}") from e

        logger.info("Created queue", extra={"queue_url": response["QueueUrl"]})
        return response["QueueUrl"]


class MockQueueClient:
    """
    In-memory queues for local development.

    CreateQueue is idempotent in SQS when called with the same name,
    so creating an existing queue returns its URL again.
    """

    def __init__(self, endpoint_url: str = "http://localhost:4566") -> None:
        self._endpoint_url = endpoint_url.rstrip("/")
        self._queue_urls: dict[str, str] = {}
        logger.info("Initialized mock queue client (in-memory)")

    async def list_queues(self) -> list[str]:
        return [self._queue_urls[name] for name in sorted(self._queue_urls)]

    async def create_queue(self, queue_name: str) -> str:
        if not queue_name:
            raise QueueError("InvalidParameterValue: queue name is empty")

        url = self._queue_urls.setdefault(
            queue_name,
            f"{self._endpoint_url}/{MOCK_ACCOUNT_ID}/{queue_name}",
        )
        return url


# ---------------------------------------------------------------------------
# SNS
# ---------------------------------------------------------------------------

class SnsTopicClient:
    """Emulated SNS client backed by boto3."""

    def __init__(self, config: AwsConfig, client: Any = None) -> None:
        self._sns_client = client if client is not None else create_boto_client("sns", config)
        logger.info("Initialized SNS client", extra={"endpoint": config.endpoint_url})

    async def list_topics(self) -> list[dict[str, Any]]:
        try:
            response = await asyncio.to_thread(self._sns_client.list_topics)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to list topics", extra={"error": str(e)})
            raise TopicError(f"list_topics failed: {e}") from e

        return response.get("Topics") or []

    async def create_topic(self, topic_name: str) -> str:
        try:
            response = await asyncio.to_thread(
                self._sns_client.create_topic,
                Name=topic_name,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Failed to create topic",
                extra={"topic_name": topic_name, "error": str(e)}
            )
            raise TopicError(f"create_topic failed: {e}") from e

        logger.info("Created topic", extra={"topic_arn": response["TopicArn"]})
        return response["TopicArn"]


class MockTopicClient:
    """In-memory topics for local development. CreateTopic is idempotent."""

    def __init__(self, region: str = "us-east-1") -> None:
        self._region = region
        self._topic_arns: dict[str, str] = {}
        logger.info("Initialized mock topic client (in-memory)")

    async def list_topics(self) -> list[dict[str, Any]]:
        return [{"TopicArn": self._topic_arns[name]} for name in sorted(self._topic_arns)]

    async def create_topic(self, topic_name: str) -> str:
        if not topic_name:
            raise TopicError("InvalidParameter: topic name is empty")

        return self._topic_arns.setdefault(
            topic_name,
            f"arn:aws:sns:{self._region}:{MOCK_ACCOUNT_ID}:{topic_name}",
        )


# ---------------------------------------------------------------------------
# Factory Functions
# ---------------------------------------------------------------------------

def create_queue_client(
    config: Optional[AwsConfig] = None,
    mock_mode: bool = False,
) -> QueueClient:
    """Create queue client based on configuration."""
    if mock_mode:
        return MockQueueClient(config.endpoint_url) if config else MockQueueClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return SqsQueueClient(config)


def create_topic_client(
    config: Optional[AwsConfig] = None,
    mock_mode: bool = False,
) -> TopicClient:
    """Create topic client based on configuration."""
    if mock_mode:
        return MockTopicClient(config.region) if config else MockTopicClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return SnsTopicClient(config)
