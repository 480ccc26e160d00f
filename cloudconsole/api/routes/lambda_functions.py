"""
Function API endpoints.

Passthrough listing of the functions deployed to the emulator.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status

from ...infrastructure.compute.client import FunctionError
from ..dependencies import FunctionClientDep
from ..schemas import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/functions",
    response_model=list[dict[str, Any]],
    summary="List functions",
    description="Function descriptors exactly as the backend reports them (first page only).",
    responses={500: {"model": ErrorResponse}},
)
async def list_functions(functions: FunctionClientDep) -> list[dict[str, Any]]:
    try:
        return await functions.list_functions()
    except FunctionError as e:
        logger.error("Error listing Lambda functions", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing Lambda functions",
        )
