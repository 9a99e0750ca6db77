"""Business logic services."""

from category_service.services.category_service import CategoryService, ParentScope
from category_service.services.listing import ListParams, Page
from category_service.services.tag_service import TagService
from category_service.services.user_client import UserServiceClient

__all__ = [
    "CategoryService",
    "ListParams",
    "Page",
    "ParentScope",
    "TagService",
    "UserServiceClient",
]
