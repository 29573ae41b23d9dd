"""
Shared response schemas: confirmations, errors, health.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Largest value an INTEGER primary key column holds (PostgreSQL int4).
MAX_ID = 2_147_483_647


class MessageResponse(BaseModel):
    """
    Confirmation returned by every write endpoint.

    Example:
        {"message": "Habit created successfully", "id": 7}
    """
    message: str = Field(description="Human-readable confirmation")
    id: Optional[int] = Field(default=None, description="Identifier of the affected record")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable category ("validation_error", "conflict", "not_found", ...)
        message: Human-readable description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
