"""Tag Store - flat CRUD plus popularity ranking."""

import uuid

from sqlalchemy import func, select

from category_service.core.exceptions import InvalidInputError
from category_service.core.slug import generate_slug
from category_service.infra.logging import get_logger
from category_service.models.tag import Tag
from category_service.schemas.tag import TagCreate, TagUpdate
from category_service.services.base_service import SluggedEntityService
from category_service.services.listing import (
    ListParams,
    Page,
    SortSpec,
    fetch_page,
    search_condition,
)

logger = get_logger(__name__)

TAG_SORT = SortSpec(
    columns={
        "name": Tag.name,
        "usageCount": Tag.usage_count,
        "usage_count": Tag.usage_count,
        "createdAt": Tag.created_at,
        "created_at": Tag.created_at,
    },
    default_key="usageCount",
    default_direction="desc",
    tiebreakers=(Tag.name, Tag.id),
)


class TagService(SluggedEntityService[Tag]):
    """Business operations over tags."""

    model = Tag
    entity_name = "Tag"

    async def list_tags(self, params: ListParams) -> Page[Tag]:
        """List tags (default order: most used first)."""
        params.validate(self.config.max_page_limit)

        conditions = [Tag.is_active == params.is_active]
        if params.search:
            conditions.append(search_condition(Tag.name, Tag.description, needle=params.search))

        return await fetch_page(
            self.db,
            Tag,
            conditions,
            TAG_SORT.order_by(params.sort_by, params.sort_order),
            params,
        )

    async def get_popular(self, limit: int | None = None) -> list[Tag]:
        """Active tags ordered by (usage_count desc, name asc).

        Args:
            limit: Number of tags (defaults to ``popular_tags_limit``)
        """
        limit = self.config.popular_tags_limit if limit is None else limit
        if not 1 <= limit <= self.config.max_page_limit:
            raise InvalidInputError(f"limit must be between 1 and {self.config.max_page_limit}")

        result = await self.db.scalars(
            select(Tag)
            .where(Tag.is_active == True)  # noqa: E712
            .order_by(Tag.usage_count.desc(), Tag.name.asc())
            .limit(limit)
        )
        return list(result.all())

    async def create(self, data: TagCreate) -> Tag:
        """Create a tag with a slug unique among tags."""

        async def build() -> Tag:
            tag = Tag(
                name=data.name,
                slug=await generate_slug(data.name, self.slug_checker()),
                description=data.description,
                color=data.color,
                usage_count=0,
                is_active=True,
            )
            self.db.add(tag)
            return tag

        tag = await self.commit_with_slug_retry(build)
        logger.info("Tag created", tag_id=str(tag.id), slug=tag.slug)
        return tag

    async def update(self, tag_id: uuid.UUID, data: TagUpdate) -> Tag:
        """Apply a partial update; a new name re-derives the slug."""
        changes = data.model_dump(exclude_unset=True)

        async def build() -> Tag:
            tag = await self.get(tag_id)
            for key, value in changes.items():
                setattr(tag, key, value)
            if "name" in changes:
                tag.slug = await generate_slug(changes["name"], self.slug_checker(exclude_id=tag.id))
            tag.updated_at = func.now()
            return tag

        tag = await self.commit_with_slug_retry(build)
        logger.info("Tag updated", tag_id=str(tag.id), fields=sorted(changes), slug=tag.slug)
        return tag

    async def delete(self, tag_id: uuid.UUID) -> None:
        tag = await self.get(tag_id)
        await self.db.delete(tag)
        await self.db.commit()
        logger.info("Tag deleted", tag_id=str(tag_id), slug=tag.slug)
