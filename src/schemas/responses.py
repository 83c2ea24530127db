"""Shared response schemas."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error envelope returned by every 4xx/5xx response."""

    error: str


class HealthResponse(BaseModel):
    status: str
