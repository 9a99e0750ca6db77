"""Tag request/response schemas."""

import uuid
from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from category_service.schemas.common import (
    HEX_COLOR_PATTERN,
    CamelModel,
    Pagination,
    blank_to_none,
)


class TagCreate(CamelModel):
    """Body of POST /tags."""

    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    slug: str | None = Field(
        default=None,
        exclude=True,
        description="Accepted for client compatibility and ignored; slugs come from name",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("color", mode="before")
    @classmethod
    def blank_color(cls, v: object) -> object:
        return blank_to_none(v)


class TagUpdate(CamelModel):
    """Body of PUT /tags/{id}. Absent fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    is_active: bool | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("color", mode="before")
    @classmethod
    def blank_color(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("name", "is_active")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class TagRead(CamelModel):
    """Tag as returned by the API."""

    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    color: str | None
    usage_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TagEnvelope(CamelModel):
    tag: TagRead


class TagListResponse(CamelModel):
    tags: list[TagRead]
    pagination: Pagination


class PopularTagsResponse(CamelModel):
    tags: list[TagRead]
