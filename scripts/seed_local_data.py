#!/usr/bin/env python
"""Seed a local database with sample categories and tags.

This script:
1. Creates the tables if they do not exist
2. Creates the default root categories (when the table is empty)
3. Optionally adds a sample category tree and a few tags

Usage:
    # Default categories only
    python scripts/seed_local_data.py

    # Add a sample subtree under "Technology" and sample tags
    python scripts/seed_local_data.py --sample-tree --sample-tags

    # Print the tree under a category
    python scripts/seed_local_data.py --show technology
"""

import argparse
import asyncio
import sys

from sqlalchemy import select

from category_service.config import settings
from category_service.core.exceptions import ServiceError
from category_service.infra.database import Database
from category_service.infra.logging import get_logger, setup_logging
from category_service.models import Category
from category_service.schemas.category import CategoryCreate
from category_service.schemas.tag import TagCreate
from category_service.services.bootstrap import seed_default_categories
from category_service.services.category_service import CategoryService
from category_service.services.tag_service import TagService

setup_logging()
logger = get_logger(__name__)


# Children keyed by the slug of their parent
SAMPLE_TREE: dict[str, list[str]] = {
    "technology": ["Programming", "Hardware"],
    "programming": ["Python", "Databases"],
    "travel": ["Europe", "Asia"],
}

SAMPLE_TAGS = ["python", "sqlalchemy", "fastapi", "postgres", "async"]


async def find_by_slug(db: Database, slug: str) -> Category | None:
    async with db.session() as session:
        return await session.scalar(select(Category).where(Category.slug == slug))


async def create_sample_tree(db: Database) -> int:
    """Create the sample children under their parents; returns rows created."""
    created = 0
    for parent_slug, children in SAMPLE_TREE.items():
        parent = await find_by_slug(db, parent_slug)
        if parent is None:
            print(f"  Skipping children of '{parent_slug}': parent not found")
            continue
        for position, name in enumerate(children):
            async with db.session() as session:
                await CategoryService(session).create(
                    CategoryCreate(name=name, parent_id=parent.id, sort_order=position)
                )
            created += 1
    return created


async def create_sample_tags(db: Database) -> int:
    for name in SAMPLE_TAGS:
        async with db.session() as session:
            await TagService(session).create(TagCreate(name=name))
    return len(SAMPLE_TAGS)


async def show_tree(db: Database, slug: str) -> int:
    root = await find_by_slug(db, slug)
    if root is None:
        print(f"Category not found: {slug}")
        return 1

    async with db.session() as session:
        entries = await CategoryService(session).get_hierarchy(root.id)

    print(f"\nHierarchy under '{slug}':")
    print("-" * 40)
    for category, depth in entries:
        print(f"{'  ' * depth}- {category.name} ({category.slug})")
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Seed local category service data")
    parser.add_argument("--sample-tree", action="store_true", help="Add sample child categories")
    parser.add_argument("--sample-tags", action="store_true", help="Add sample tags")
    parser.add_argument("--show", metavar="SLUG", help="Print the hierarchy under a category")
    args = parser.parse_args()

    db = Database.from_settings(settings)
    try:
        await db.create_schema()

        if args.show:
            return await show_tree(db, args.show)

        created = await seed_default_categories(db)
        print(f"Default categories created: {created}")

        if args.sample_tree:
            print(f"Sample categories created: {await create_sample_tree(db)}")
        if args.sample_tags:
            print(f"Sample tags created: {await create_sample_tags(db)}")
        return 0

    except ServiceError as e:
        print(f"Error: {e.message}")
        return 1

    finally:
        await db.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
