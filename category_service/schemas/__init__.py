"""Pydantic schemas for request/response validation."""

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
from category_service.schemas.common import ErrorResponse, HealthResponse, MessageResponse, Pagination
from category_service.schemas.tag import (
    PopularTagsResponse,
    TagCreate,
    TagEnvelope,
    TagListResponse,
    TagRead,
    TagUpdate,
)
from category_service.schemas.user import AuthUser

__all__ = [
    "AuthUser",
    "CategoryCreate",
    "CategoryEnvelope",
    "CategoryListResponse",
    "CategoryNode",
    "CategoryRead",
    "CategoryReparent",
    "CategoryUpdate",
    "ErrorResponse",
    "HealthResponse",
    "HierarchyResponse",
    "MessageResponse",
    "Pagination",
    "PopularTagsResponse",
    "TagCreate",
    "TagEnvelope",
    "TagListResponse",
    "TagRead",
    "TagUpdate",
]
