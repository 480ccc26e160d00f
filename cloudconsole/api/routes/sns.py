"""
Notification topic API endpoints.

- GET  /topics   list topics
- POST /topics   create a topic
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ...infrastructure.messaging.client import TopicError
from ..dependencies import TopicClientDep
from ..schemas import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateTopicRequest(BaseModel):
    """Request to create a topic."""
    model_config = ConfigDict(populate_by_name=True)

    topic_name: str = Field(alias="topicName", description="Name of the new topic")


class TopicCreatedResponse(BaseModel):
    """Confirmation with the ARN of the new topic."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    topic_arn: str = Field(alias="topicArn")


@router.get(
    "/topics",
    response_model=list[dict[str, Any]],
    summary="List topics",
    responses={500: {"model": ErrorResponse}},
)
async def list_topics(topics: TopicClientDep) -> list[dict[str, Any]]:
    try:
        return await topics.list_topics()
    except TopicError as e:
        logger.error("Error listing topics", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing topics",
        )


@router.post(
    "/topics",
    response_model=TopicCreatedResponse,
    summary="Create topic",
    responses={500: {"model": ErrorResponse}},
)
async def create_topic(
    request: CreateTopicRequest,
    topics: TopicClientDep,
) -> TopicCreatedResponse:
    try:
        topic_arn = await topics.create_topic(request.topic_name)
    except TopicError as e:
        logger.error(
            "Error creating topic",
            extra={"topic_name": request.topic_name, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating topic",
        )

    return TopicCreatedResponse(message="Topic created successfully", topic_arn=topic_arn)
