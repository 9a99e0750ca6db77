"""Core module - Slug generation and service error kinds."""

from category_service.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    SlugGenerationError,
    UnauthorizedError,
)
from category_service.core.slug import generate_slug, slugify

__all__ = [
    "ConflictError",
    "ForbiddenError",
    "InvalidInputError",
    "NotFoundError",
    "ServiceError",
    "SlugGenerationError",
    "UnauthorizedError",
    "generate_slug",
    "slugify",
]
