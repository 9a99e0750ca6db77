"""Category Tree Manager.

Owns every read and write of the category forest:
- CRUD with slug allocation scoped to categories
- Hierarchy queries (recursive CTE over parent_id -> id)
- Cycle-safe reparenting
- Deletion only of childless categories

Structural writes (anything that sets or removes a parent edge) take a
transaction-scoped advisory lock on PostgreSQL, so the cycle check and the
write it guards see the same tree. Other dialects run without that lock.
"""

import enum
import uuid

from sqlalchemy import Integer, func, literal_column, select, text
from sqlalchemy.exc import IntegrityError

from category_service.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from category_service.core.slug import generate_slug
from category_service.infra.logging import get_logger
from category_service.models.category import Category
from category_service.schemas.category import CategoryCreate, CategoryUpdate
from category_service.services.base_service import SluggedEntityService
from category_service.services.listing import (
    ListParams,
    Page,
    SortSpec,
    fetch_page,
    search_condition,
)

logger = get_logger(__name__)

# pg_advisory_xact_lock key shared by all structural category writes
TREE_LOCK_KEY = 0x43415447

CATEGORY_SORT = SortSpec(
    columns={
        "name": Category.name,
        "sortOrder": Category.sort_order,
        "sort_order": Category.sort_order,
        "createdAt": Category.created_at,
        "created_at": Category.created_at,
    },
    default_key="sortOrder",
    default_direction="asc",
    tiebreakers=(Category.name, Category.id),
)

DESCENDANT_ERROR = "Cannot set parent to a descendant category"
HAS_CHILDREN_ERROR = "Cannot delete category with children. Move or delete children first."


class ParentScope(enum.Enum):
    """Parent filter values that are not a concrete category id."""

    ANY = "any"
    ROOT = "root"


class CategoryService(SluggedEntityService[Category]):
    """Business operations over the category tree."""

    model = Category
    entity_name = "Category"

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_categories(
        self,
        params: ListParams,
        parent: ParentScope | uuid.UUID = ParentScope.ANY,
    ) -> Page[Category]:
        """List categories.

        Args:
            params: Paging, activity, search and sort options
            parent: ANY (no filter), ROOT (top-level only) or a parent id

        Returns:
            Page of categories with the total matching the same filters
        """
        params.validate(self.config.max_page_limit)

        conditions = [Category.is_active == params.is_active]
        if parent is ParentScope.ROOT:
            conditions.append(Category.parent_id.is_(None))
        elif isinstance(parent, uuid.UUID):
            conditions.append(Category.parent_id == parent)
        if params.search:
            conditions.append(
                search_condition(Category.name, Category.description, needle=params.search)
            )

        return await fetch_page(
            self.db,
            Category,
            conditions,
            CATEGORY_SORT.order_by(params.sort_by, params.sort_order),
            params,
        )

    async def get_hierarchy(self, root_id: uuid.UUID) -> list[tuple[Category, int]]:
        """Return the subtree rooted at ``root_id`` with each node's depth.

        Rows are ordered by (depth, sort_order). A root that does not exist
        yields an empty list. The tree is acyclic (every structural write is
        cycle-checked), so the traversal always terminates.
        """
        tree = (
            select(
                Category.id,
                literal_column("0", Integer).label("depth"),
            )
            .where(Category.id == root_id)
            .cte("category_tree", recursive=True)
        )
        tree = tree.union_all(
            select(Category.id, (tree.c.depth + 1).label("depth"))
            .join(tree, Category.parent_id == tree.c.id)
        )

        result = await self.db.execute(
            select(Category, tree.c.depth)
            .join(tree, Category.id == tree.c.id)
            .order_by(tree.c.depth, Category.sort_order, Category.name)
        )
        return [(category, depth) for category, depth in result.all()]

    async def descendant_ids(self, category_id: uuid.UUID) -> set[uuid.UUID]:
        """Return ``category_id`` plus the ids of all its descendants.

        Uses UNION (not UNION ALL) so the traversal terminates even if the
        stored data already contains a cycle.
        """
        closure = (
            select(Category.id)
            .where(Category.id == category_id)
            .cte("category_closure", recursive=True)
        )
        closure = closure.union(
            select(Category.id).join(closure, Category.parent_id == closure.c.id)
        )

        result = await self.db.scalars(select(closure.c.id))
        return set(result.all())

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create(self, data: CategoryCreate) -> Category:
        """Create a category.

        Raises:
            NotFoundError: parent_id given but no such category
            InvalidInputError: name yields an empty slug
            ConflictError: slug race lost on every retry
        """

        async def build() -> Category:
            if data.parent_id is not None:
                await self._lock_tree()
                await self._require_parent(data.parent_id)

            slug = await generate_slug(data.name, self.slug_checker())
            category = Category(
                name=data.name,
                slug=slug,
                description=data.description,
                parent_id=data.parent_id,
                color=data.color,
                icon=data.icon,
                sort_order=data.sort_order,
                is_active=True,
            )
            self.db.add(category)
            return category

        category = await self.commit_with_slug_retry(build)
        logger.info(
            "Category created",
            category_id=str(category.id),
            slug=category.slug,
            parent_id=str(category.parent_id) if category.parent_id else None,
        )
        return category

    async def update(self, category_id: uuid.UUID, data: CategoryUpdate) -> Category:
        """Apply a partial update.

        Fields absent from ``data`` are untouched. A new name re-derives the
        slug (the category's own slug does not count as a collision). A
        ``parent_id`` in the update is checked like ``reparent``.

        Raises:
            NotFoundError: category (or new parent) does not exist
            ConflictError: new parent is the category or one of its descendants
        """
        changes = data.model_dump(exclude_unset=True)

        async def build() -> Category:
            category = await self.get(category_id)
            if "parent_id" in changes:
                await self._check_new_parent(category.id, changes["parent_id"])

            for key, value in changes.items():
                setattr(category, key, value)
            if "name" in changes:
                category.slug = await generate_slug(
                    changes["name"], self.slug_checker(exclude_id=category.id)
                )
            category.updated_at = func.now()
            return category

        category = await self.commit_with_slug_retry(build)
        logger.info(
            "Category updated",
            category_id=str(category.id),
            fields=sorted(changes),
            slug=category.slug,
        )
        return category

    async def delete(self, category_id: uuid.UUID) -> None:
        """Delete a childless category.

        Raises:
            NotFoundError: category does not exist
            ConflictError: at least one category still has it as parent
        """
        await self._lock_tree()
        category = await self.get(category_id)

        children = await self.db.scalar(
            select(func.count()).select_from(Category).where(Category.parent_id == category_id)
        )
        if children:
            logger.info(
                "Delete refused, category has children",
                category_id=str(category_id),
                children=children,
            )
            raise ConflictError(HAS_CHILDREN_ERROR)

        await self.db.delete(category)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # A child was attached after the check; the FK refused the delete.
            await self.db.rollback()
            logger.warning("Delete blocked by foreign key", category_id=str(category_id), error=str(e.orig))
            raise ConflictError(HAS_CHILDREN_ERROR) from e

        logger.info("Category deleted", category_id=str(category_id), slug=category.slug)

    async def reparent(self, category_id: uuid.UUID, new_parent_id: uuid.UUID | None) -> Category:
        """Move a category under ``new_parent_id`` (None = make it a root).

        Only parent_id and updated_at change.

        Raises:
            NotFoundError: category or new parent does not exist
            ConflictError: new parent is the category or one of its descendants
        """
        category = await self.get(category_id)
        previous_parent = category.parent_id
        await self._check_new_parent(category.id, new_parent_id)

        category.parent_id = new_parent_id
        category.updated_at = func.now()
        await self.db.commit()
        await self.db.refresh(category)

        logger.info(
            "Category reparented",
            category_id=str(category.id),
            from_parent=str(previous_parent) if previous_parent else None,
            to_parent=str(new_parent_id) if new_parent_id else None,
        )
        return category

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _lock_tree(self) -> None:
        """Serialize structural writes for the rest of the transaction (PostgreSQL only)."""
        if self.db.get_bind().dialect.name == "postgresql":
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(:key)"),
                {"key": TREE_LOCK_KEY},
            )

    async def _require_parent(self, parent_id: uuid.UUID) -> None:
        exists = await self.db.scalar(select(Category.id).where(Category.id == parent_id))
        if exists is None:
            raise NotFoundError("Parent category not found")

    async def _check_new_parent(
        self,
        category_id: uuid.UUID,
        new_parent_id: uuid.UUID | None,
    ) -> None:
        """Validate that ``category_id`` may hang under ``new_parent_id``.

        Computes the descendant closure of ``category_id`` (itself included)
        and rejects any parent inside it.
        """
        await self._lock_tree()
        if new_parent_id is None:
            return
        if new_parent_id == category_id:
            raise ConflictError(DESCENDANT_ERROR)

        await self._require_parent(new_parent_id)
        if new_parent_id in await self.descendant_ids(category_id):
            logger.info(
                "Reparent refused, target is a descendant",
                category_id=str(category_id),
                new_parent_id=str(new_parent_id),
            )
            raise ConflictError(DESCENDANT_ERROR)


def parse_parent_filter(raw: str | None) -> ParentScope | uuid.UUID:
    """Turn the ``parentId`` query value into a parent filter.

    Omitted or empty -> ANY, ``null`` -> ROOT, otherwise a UUID.
    """
    if raw is None or raw == "":
        return ParentScope.ANY
    if raw.lower() == "null":
        return ParentScope.ROOT
    try:
        return uuid.UUID(raw)
    except ValueError as e:
        raise InvalidInputError("parentId must be a UUID or 'null'") from e
