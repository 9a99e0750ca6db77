"""Common schemas for API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """Pagination block returned by list endpoints."""

    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    total: int = Field(description="Rows matching the filters")
    pages: int = Field(description="ceil(total / limit)")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(description="Human-readable error message")
    details: list[dict[str, Any]] | None = Field(
        default=None,
        description="Field-level validation errors",
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Health status (healthy, degraded)")
    service: str = Field(description="Service name")
    version: str = Field(description="Service version")
    environment: str = Field(description="Environment name")
    checks: dict[str, bool] = Field(default_factory=dict, description="Individual health checks")

    model_config = {"extra": "forbid"}


def blank_to_none(value: Any) -> Any:
    """Treat an empty string as "no value" (clients send "" for cleared colors)."""
    if isinstance(value, str) and value == "":
        return None
    return value
