"""Standardized error response schema.

Every translated failure, whether produced by the error controller inside
the dispatch pipeline or by a transport-level exception handler, has this
shape:

- Machine-readable error codes for programmatic handling
- Human-readable messages for display
- Correlation and request IDs for tracing
- Debug information in development environments only
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from restcore.core.config import Settings


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(
        ...,
        description="Name of the service",
        examples=["Restcore"],
    )

    version: str = Field(
        ...,
        description="Version of the service",
        examples=["0.1.0"],
    )

    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ServiceInfo":
        """Build service metadata from application settings."""
        return cls(
            name=settings.app_name,
            version=settings.app_version,
            environment=settings.environment,
        )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["METHOD_NOT_ALLOWED", "ACTION_NOT_FOUND", "INTERNAL_ERROR"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Method Not Allowed", "Not Found"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details",
        examples=[{"method": "DELETE", "allowed_methods": ["GET", "PUT"]}],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
        examples=["LOW", "CRITICAL"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description="Unique request identifier",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )
