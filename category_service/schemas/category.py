"""Category request/response schemas."""

import uuid
from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from category_service.models.category import Category
from category_service.schemas.common import (
    HEX_COLOR_PATTERN,
    CamelModel,
    Pagination,
    blank_to_none,
)


class CategoryCreate(CamelModel):
    """Body of POST /categories."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    parent_id: uuid.UUID | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    icon: str | None = Field(default=None, max_length=50)
    sort_order: int = Field(default=0, ge=0)
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


class CategoryUpdate(CamelModel):
    """Body of PUT /categories/{id}.

    Only the fields present in the body are applied; an explicit ``null``
    clears a nullable field.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    parent_id: uuid.UUID | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    icon: str | None = Field(default=None, max_length=50)
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("color", mode="before")
    @classmethod
    def blank_color(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("name", "sort_order", "is_active")
    @classmethod
    def reject_null(cls, v: object) -> object:
        """These columns are NOT NULL; omit them instead of sending null."""
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class CategoryReparent(CamelModel):
    """Body of PUT /categories/{id}/hierarchy. ``null`` moves the node to the root level."""

    parent_id: uuid.UUID | None = None

    model_config = ConfigDict(extra="forbid")


class CategoryRead(CamelModel):
    """Category as returned by the API."""

    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    parent_id: uuid.UUID | None
    color: str | None
    icon: str | None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryNode(CamelModel):
    """One row of a hierarchy response."""

    id: uuid.UUID
    name: str
    slug: str
    parent_id: uuid.UUID | None
    color: str | None
    icon: str | None
    sort_order: int
    depth: int = Field(description="Distance from the requested root (root = 0)")

    @classmethod
    def from_entry(cls, category: Category, depth: int) -> "CategoryNode":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            parent_id=category.parent_id,
            color=category.color,
            icon=category.icon,
            sort_order=category.sort_order,
            depth=depth,
        )


class CategoryEnvelope(CamelModel):
    category: CategoryRead


class CategoryListResponse(CamelModel):
    categories: list[CategoryRead]
    pagination: Pagination


class HierarchyResponse(CamelModel):
    hierarchy: list[CategoryNode]
