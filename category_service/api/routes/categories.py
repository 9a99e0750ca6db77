"""Category endpoints.

Reads are public; updates, deletes and reparenting require an editor.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from category_service.api.deps import Categories, CreatorUser, EditorUser
from category_service.infra.logging import get_logger
from category_service.schemas.category import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListResponse,
    CategoryNode,
    CategoryRead,
    CategoryReparent,
    CategoryUpdate,
    HierarchyResponse,
)
from category_service.schemas.common import MessageResponse, Pagination
from category_service.services.category_service import parse_parent_filter
from category_service.services.listing import ListParams

router = APIRouter()
logger = get_logger(__name__)


def _envelope(category) -> CategoryEnvelope:
    return CategoryEnvelope(category=CategoryRead.model_validate(category))


@router.get("", response_model=CategoryListResponse, summary="List categories")
async def list_categories(
    service: Categories,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
    parent_id: Annotated[str | None, Query(alias="parentId")] = None,
    is_active: Annotated[bool, Query(alias="isActive")] = True,
    search: str | None = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
) -> CategoryListResponse:
    """List categories with filters and pagination.

    ``parentId=null`` lists root categories only; omit it to list all.
    """
    params = ListParams(
        page=page,
        limit=limit or service.config.default_page_limit,
        is_active=is_active,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = await service.list_categories(params, parent=parse_parent_filter(parent_id))

    return CategoryListResponse(
        categories=[CategoryRead.model_validate(c) for c in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.get("/{category_id}", response_model=CategoryEnvelope, summary="Get a category")
async def get_category(category_id: uuid.UUID, service: Categories) -> CategoryEnvelope:
    category = await service.get(category_id)
    return _envelope(category)


@router.get(
    "/{category_id}/hierarchy",
    response_model=HierarchyResponse,
    summary="Get the subtree rooted at a category",
)
async def get_category_hierarchy(category_id: uuid.UUID, service: Categories) -> HierarchyResponse:
    """Descendant tree of a category, ordered by depth then sort order.

    A category that does not exist gives an empty hierarchy.
    """
    entries = await service.get_hierarchy(category_id)
    return HierarchyResponse(
        hierarchy=[CategoryNode.from_entry(category, depth) for category, depth in entries]
    )


@router.post(
    "",
    response_model=CategoryEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    body: CategoryCreate,
    service: Categories,
    user: CreatorUser,
) -> CategoryEnvelope:
    category = await service.create(body)
    logger.info(
        "Category created via API",
        category_id=str(category.id),
        user_id=user.id if user else None,
    )
    return _envelope(category)


@router.put("/{category_id}", response_model=CategoryEnvelope, summary="Update a category")
async def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    service: Categories,
    user: EditorUser,
) -> CategoryEnvelope:
    category = await service.update(category_id, body)
    return _envelope(category)


@router.delete("/{category_id}", response_model=MessageResponse, summary="Delete a category")
async def delete_category(
    category_id: uuid.UUID,
    service: Categories,
    user: EditorUser,
) -> MessageResponse:
    """Delete a category that has no children."""
    await service.delete(category_id)
    logger.info("Category deleted via API", category_id=str(category_id), user_id=user.id)
    return MessageResponse(message="Category deleted successfully")


@router.put(
    "/{category_id}/hierarchy",
    response_model=CategoryEnvelope,
    summary="Move a category under another parent",
)
async def reparent_category(
    category_id: uuid.UUID,
    body: CategoryReparent,
    service: Categories,
    user: EditorUser,
) -> CategoryEnvelope:
    """Set a new parent (``parentId: null`` makes the category a root).

    Rejected with 409 when the new parent is the category itself or one of
    its descendants.
    """
    category = await service.reparent(category_id, body.parent_id)
    return _envelope(category)
