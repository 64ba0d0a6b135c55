"""
StrToFile Backend — API Response Schemas
==========================================

What:  Pydantic models for the non-archive responses of the API (errors,
       health, service info). They also drive the OpenAPI documentation.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "format_error",
            "message": "The ZIP file is invalid or corrupted",
            "details": {"source_index": 0, "filename": "broken.zip"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for container and load balancer probes."""
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")


class EndpointInfo(BaseModel):
    method: str
    path: str
    description: str


class ApiInfoResponse(BaseModel):
    """Service description returned by GET /api/download/info."""
    name: str
    version: str
    description: str
    endpoints: List[EndpointInfo]
    timestamp: datetime
