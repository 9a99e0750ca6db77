"""Shared list/search/pagination for category and tag listings."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from category_service.core.exceptions import InvalidInputError

T = TypeVar("T")


@dataclass(frozen=True)
class ListParams:
    """Filters common to every list endpoint.

    ``sort_by`` and ``sort_order`` are the raw query values; unknown values
    fall back to the entity's defaults instead of failing.
    """

    page: int = 1
    limit: int = 50
    is_active: bool = True
    search: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def validate(self, max_limit: int) -> None:
        if self.page < 1:
            raise InvalidInputError("page must be >= 1")
        if not 1 <= self.limit <= max_limit:
            raise InvalidInputError(f"limit must be between 1 and {max_limit}")


@dataclass
class Page(Generic[T]):
    """One page of rows plus the total matching the same filters."""

    items: list[T]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass(frozen=True)
class SortSpec:
    """Allow-list of sortable columns keyed by their query names.

    Both camelCase (``sortOrder``) and snake_case (``sort_order``) keys are
    listed so either spelling works.
    """

    columns: dict[str, InstrumentedAttribute[Any]]
    default_key: str
    default_direction: str = "asc"
    tiebreakers: tuple[InstrumentedAttribute[Any], ...] = field(default_factory=tuple)

    def order_by(self, sort_by: str | None, sort_order: str | None) -> list[ColumnElement[Any]]:
        column = self.columns.get(sort_by or "", self.columns[self.default_key])
        direction = (sort_order or "").lower()
        if direction not in ("asc", "desc"):
            direction = self.default_direction
        primary = column.asc() if direction == "asc" else column.desc()
        return [primary, *(col.asc() for col in self.tiebreakers)]


def search_condition(*columns: InstrumentedAttribute[Any], needle: str) -> ColumnElement[bool]:
    """Case-insensitive substring match against any of ``columns``.

    LIKE wildcards in ``needle`` are matched literally.
    """
    lowered = needle.lower()
    return or_(*(func.lower(col).contains(lowered, autoescape=True) for col in columns))


async def fetch_page(
    db: AsyncSession,
    model: type[T],
    conditions: list[ColumnElement[bool]],
    order_by: list[ColumnElement[Any]],
    params: ListParams,
) -> Page[T]:
    """Run the page query and an independent COUNT over the same filters."""
    total = await db.scalar(select(func.count()).select_from(model).where(*conditions))

    result = await db.scalars(
        select(model)
        .where(*conditions)
        .order_by(*order_by)
        .offset(params.offset)
        .limit(params.limit)
    )
    return Page(items=list(result.all()), page=params.page, limit=params.limit, total=total or 0)
