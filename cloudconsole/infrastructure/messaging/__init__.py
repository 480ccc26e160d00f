"""
Queue (SQS) and notification topic (SNS) integration.

Both services are thin passthroughs; each has a boto3 client and an
in-memory mock.
"""

from .client import (
    QueueClient,
    QueueError,
    TopicClient,
    TopicError,
    create_queue_client,
    create_topic_client,
)

__all__ = [
    "QueueClient",
    "QueueError",
    "TopicClient",
    "TopicError",
    "create_queue_client",
    "create_topic_client",
]
