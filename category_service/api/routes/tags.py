"""Tag endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from category_service.api.deps import CreatorUser, EditorUser, Tags
from category_service.infra.logging import get_logger
from category_service.schemas.common import MessageResponse, Pagination
from category_service.schemas.tag import (
    PopularTagsResponse,
    TagCreate,
    TagEnvelope,
    TagListResponse,
    TagRead,
    TagUpdate,
)
from category_service.services.listing import ListParams

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=TagListResponse, summary="List tags")
async def list_tags(
    service: Tags,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
    is_active: Annotated[bool, Query(alias="isActive")] = True,
    search: str | None = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
) -> TagListResponse:
    """List tags, most used first unless another sort is requested."""
    params = ListParams(
        page=page,
        limit=limit or service.config.default_page_limit,
        is_active=is_active,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = await service.list_tags(params)

    return TagListResponse(
        tags=[TagRead.model_validate(t) for t in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.get("/popular", response_model=PopularTagsResponse, summary="Most used tags")
async def popular_tags(
    service: Tags,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> PopularTagsResponse:
    tags = await service.get_popular(limit)
    return PopularTagsResponse(tags=[TagRead.model_validate(t) for t in tags])


@router.get("/{tag_id}", response_model=TagEnvelope, summary="Get a tag")
async def get_tag(tag_id: uuid.UUID, service: Tags) -> TagEnvelope:
    tag = await service.get(tag_id)
    return TagEnvelope(tag=TagRead.model_validate(tag))


@router.post(
    "",
    response_model=TagEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tag",
)
async def create_tag(body: TagCreate, service: Tags, user: CreatorUser) -> TagEnvelope:
    tag = await service.create(body)
    return TagEnvelope(tag=TagRead.model_validate(tag))


@router.put("/{tag_id}", response_model=TagEnvelope, summary="Update a tag")
async def update_tag(
    tag_id: uuid.UUID,
    body: TagUpdate,
    service: Tags,
    user: EditorUser,
) -> TagEnvelope:
    tag = await service.update(tag_id, body)
    return TagEnvelope(tag=TagRead.model_validate(tag))


@router.delete("/{tag_id}", response_model=MessageResponse, summary="Delete a tag")
async def delete_tag(tag_id: uuid.UUID, service: Tags, user: EditorUser) -> MessageResponse:
    await service.delete(tag_id)
    logger.info("Tag deleted via API", tag_id=str(tag_id), user_id=user.id)
    return MessageResponse(message="Tag deleted successfully")
