"""Infrastructure - Database and logging."""

from category_service.infra.database import Database
from category_service.infra.logging import get_logger, setup_logging

__all__ = [
    "Database",
    "get_logger",
    "setup_logging",
]
