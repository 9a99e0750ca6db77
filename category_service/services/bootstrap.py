"""Startup seeding of the default root categories.

Runs once per process start; an empty ``categories`` table gets the
default set. Seeding is best effort: failures are logged and startup
continues.
"""

from sqlalchemy import func, select

from category_service.infra.database import Database
from category_service.infra.logging import get_logger
from category_service.models.category import Category
from category_service.schemas.category import CategoryCreate
from category_service.services.category_service import CategoryService

logger = get_logger(__name__)

DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {"name": "Technology", "description": "Posts about technology and programming", "color": "#3B82F6"},
    {"name": "Lifestyle", "description": "Posts about lifestyle and personal experiences", "color": "#10B981"},
    {"name": "Business", "description": "Posts about business and entrepreneurship", "color": "#F59E0B"},
    {"name": "Health", "description": "Posts about health and wellness", "color": "#EF4444"},
    {"name": "Travel", "description": "Posts about travel and adventures", "color": "#8B5CF6"},
]


async def seed_default_categories(db: Database) -> int:
    """Create the default categories if none exist.

    Returns:
        Number of categories created (0 when the table was not empty or
        seeding failed)
    """
    try:
        async with db.session() as session:
            count = await session.scalar(select(func.count()).select_from(Category))
            if count:
                logger.debug("Categories present, skipping seed", count=count)
                return 0

            service = CategoryService(session)
            for sort_order, entry in enumerate(DEFAULT_CATEGORIES):
                await service.create(CategoryCreate(sort_order=sort_order, **entry))

        logger.info("Default categories created", count=len(DEFAULT_CATEGORIES))
        return len(DEFAULT_CATEGORIES)

    except Exception as e:
        logger.error("Failed to create default categories", error=str(e), exc_info=True)
        return 0
