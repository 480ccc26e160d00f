"""
Health endpoints.

- /health: liveness; answers as long as the process is up
- /health/ready: readiness; probes each emulated service with a cheap
  listing call and answers 503 if any of them fails

Neither endpoint is used by the browser console.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Response, status
from pydantic import BaseModel, Field

from ... import __version__
from ...infrastructure.aws.config import BackendError
from ..dependencies import BackendDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()

UNREACHABLE_MESSAGE = "backend unreachable"


class LivenessResponse(BaseModel):
    status: str = "ok"
    version: str
    details: dict[str, Any] = Field(default_factory=dict)


class ServiceProbe(BaseModel):
    """Outcome of probing one emulated service."""
    name: str
    status: str  # "ok" or "error"
    error: Optional[str] = None


class ReadinessResponse(BaseModel):
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ServiceProbe]


async def _probe(name: str, call: Callable[[], Awaitable[Any]]) -> ServiceProbe:
    try:
        await call()
    except BackendError as e:
        logger.error("Service probe failed", extra={"service": name, "error": str(e)})
        return ServiceProbe(name=name, status="error", error=UNREACHABLE_MESSAGE)
    return ServiceProbe(name=name, status="ok")


@router.get(
    "",
    response_model=LivenessResponse,
    summary="Liveness check",
    description="Returns 200 while the process runs. Does not contact the backend.",
)
async def health_check(settings: SettingsDep) -> LivenessResponse:
    return LivenessResponse(
        version=__version__,
        details={
            "mock_mode": settings.backend_mock_mode,
            "endpoint": settings.aws_endpoint,
        },
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Lists buckets, functions, queues and topics once each.",
    responses={503: {"description": "A backend service failed", "model": ReadinessResponse}},
)
async def readiness_check(response: Response, backend: BackendDep) -> ReadinessResponse:
    checks = [
        await _probe("storage", backend.storage.list_buckets),
        await _probe("functions", backend.functions.list_functions),
        await _probe("queues", backend.queues.list_queues),
        await _probe("topics", backend.topics.list_topics),
    ]

    ready = all(check.status == "ok" for check in checks)
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(
            "Backend not ready",
            extra={"failed": [c.name for c in checks if c.status != "ok"]}
        )

    return ReadinessResponse(
        status="ready" if ready else "not_ready",
        version=__version__,
        checks=checks,
    )
