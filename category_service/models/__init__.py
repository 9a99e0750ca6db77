"""SQLAlchemy models for the category service."""

from category_service.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from category_service.models.category import Category
from category_service.models.tag import Tag

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Category",
    "Tag",
]
