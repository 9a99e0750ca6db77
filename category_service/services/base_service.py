"""Base service for slug-identified taxonomy entities.

Shared by categories and tags:
- Lookup by id with NotFound mapping
- Slug allocation scoped to the entity's own table
- Commit with retry when a concurrent writer takes the same slug first
"""

import uuid
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from category_service.config import Settings, settings as default_settings
from category_service.core.exceptions import ConflictError, NotFoundError
from category_service.core.slug import SlugExistsCheck
from category_service.infra.logging import get_logger
from category_service.models.base import Base

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class SluggedEntityService(Generic[ModelT]):
    """Common persistence logic for entities with a unique slug.

    Subclasses set ``model`` and ``entity_name``.
    """

    model: type[ModelT]
    entity_name: str

    def __init__(self, db_session: AsyncSession, config: Settings | None = None) -> None:
        """Initialize service.

        Args:
            db_session: Async SQLAlchemy session for one unit of work
            config: Settings (defaults to the process settings)
        """
        self.db = db_session
        self.config = config or default_settings

    async def get(self, entity_id: uuid.UUID) -> ModelT:
        """Fetch one row or raise NotFoundError."""
        entity = await self.db.get(self.model, entity_id)
        if entity is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return entity

    def slug_checker(self, exclude_id: uuid.UUID | None = None) -> SlugExistsCheck:
        """Build the existence check for this entity's slug namespace.

        Args:
            exclude_id: Row allowed to own the slug already (update in place)
        """

        async def exists(slug: str) -> bool:
            stmt = select(self.model.id).where(self.model.slug == slug)
            if exclude_id is not None:
                stmt = stmt.where(self.model.id != exclude_id)
            return (await self.db.scalar(stmt.limit(1))) is not None

        return exists

    async def commit_with_slug_retry(self, build: Callable[[], Awaitable[ModelT]]) -> ModelT:
        """Run ``build`` and commit, retrying when the commit hits a unique violation.

        ``build`` stages the row (allocating its slug) in ``self.db`` and
        returns it. The existence check only narrows the race window; the
        unique index is the final arbiter, so a lost race rolls the
        transaction back and ``build`` runs again against fresh data.

        Raises:
            ConflictError: Still colliding after ``slug_max_retries`` retries
        """
        attempts = self.config.slug_max_retries + 1

        for attempt in range(1, attempts + 1):
            entity = await build()
            try:
                await self.db.commit()
            except IntegrityError as e:
                await self.db.rollback()
                logger.warning(
                    "Unique violation on commit, retrying",
                    entity=self.entity_name,
                    attempt=attempt,
                    max_attempts=attempts,
                    error=str(e.orig),
                )
                continue

            await self.db.refresh(entity)
            return entity

        raise ConflictError(
            f"Could not store {self.entity_name.lower()}: slug conflict persisted "
            f"after {attempts} attempts"
        )
