"""
Response models shared by every gateway router.

Keys are camelCase on the wire, matching what the browser console sends
and expects.
"""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Confirmation returned by mutating routes."""
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    error: str = Field(description="Fixed, human-readable error message")
