"""
Queue API endpoints.

- GET  /queues   list queue URLs
- POST /queues   create a queue
"""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ...infrastructure.messaging.client import QueueError
from ..dependencies import QueueClientDep
from ..schemas import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateQueueRequest(BaseModel):
    """Request to create a queue."""
    model_config = ConfigDict(populate_by_name=True)

    queue_name: str = Field(alias="queueName", description="Name of the new queue")


class QueueCreatedResponse(BaseModel):
    """Confirmation with the URL of the new queue."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    queue_url: str = Field(alias="queueUrl")


@router.get(
    "/queues",
    response_model=list[str],
    summary="List queues",
    responses={500: {"model": ErrorResponse}},
)
async def list_queues(queues: QueueClientDep) -> list[str]:
    try:
        return await queues.list_queues()
    except QueueError as e:
        logger.error("Error listing queues", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing queues",
        )


@router.post(
    "/queues",
    response_model=QueueCreatedResponse,
    summary="Create queue",
    responses={500: {"model": ErrorResponse}},
)
async def create_queue(
    request: CreateQueueRequest,
    queues: QueueClientDep,
) -> QueueCreatedResponse:
    try:
        queue_url = await queues.create_queue(request.queue_name)
    except QueueError as e:
        logger.error(
            "Error creating queue",
            extra={"queue_name": request.queue_name, "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating queue",
        )

    return QueueCreatedResponse(message="Queue created successfully", queue_url=queue_url)
