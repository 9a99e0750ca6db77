"""FastAPI dependencies for dependency injection.

Provides:
- Database session (one unit of work per request)
- Bearer-token authentication through the user service
- Role gates for editor-only routes
"""

from typing import Annotated, AsyncGenerator, Awaitable, Callable

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from category_service.config import Settings
from category_service.core.exceptions import ForbiddenError, UnauthorizedError
from category_service.infra.database import Database
from category_service.infra.logging import get_logger
from category_service.schemas.user import AuthUser
from category_service.services.category_service import CategoryService
from category_service.services.tag_service import TagService
from category_service.services.user_client import UserServiceClient

logger = get_logger(__name__)

EDITOR_ROLES = ("admin", "editor")


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Database handle created in the application lifespan."""
    return request.app.state.db


async def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the current request.

    Yields:
        AsyncSession committed after the handler returns, rolled back if it raises
    """
    async with database.session() as session:
        yield session


def get_user_client(request: Request) -> UserServiceClient:
    """User service client created in the application lifespan."""
    return request.app.state.user_client


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    user_client: Annotated[UserServiceClient, Depends(get_user_client)],
    authorization: Annotated[str | None, Header()] = None,
) -> AuthUser:
    """Authenticate the request with the user service.

    Raises:
        UnauthorizedError: No bearer token, or the user service refused it
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise UnauthorizedError("Access token required")
    return await user_client.get_profile(token)


def require_roles(*roles: str) -> Callable[..., Awaitable[AuthUser]]:
    """Build a dependency that admits only users whose role is in ``roles``."""

    async def dependency(user: Annotated[AuthUser, Depends(get_current_user)]) -> AuthUser:
        if user.role not in roles:
            logger.warning(
                "Rejected request: insufficient role",
                user_id=user.id,
                role=user.role,
                required=list(roles),
            )
            raise ForbiddenError("Insufficient permissions")
        return user

    return dependency


async def require_creator(
    config: Annotated[Settings, Depends(get_app_settings)],
    user_client: Annotated[UserServiceClient, Depends(get_user_client)],
    authorization: Annotated[str | None, Header()] = None,
) -> AuthUser | None:
    """Gate for creation routes.

    Editors only, unless ``allow_anonymous_create`` is enabled, in which case
    anyone may create (the user is still resolved when a token is sent).
    """
    if config.allow_anonymous_create and extract_bearer_token(authorization) is None:
        return None

    user = await get_current_user(user_client, authorization)
    if config.allow_anonymous_create:
        return user
    return await require_roles(*EDITOR_ROLES)(user)


# Type aliases for cleaner annotations
AppSettings = Annotated[Settings, Depends(get_app_settings)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
EditorUser = Annotated[AuthUser, Depends(require_roles(*EDITOR_ROLES))]
CreatorUser = Annotated[AuthUser | None, Depends(require_creator)]


def get_category_service(db: DbSession, config: AppSettings) -> CategoryService:
    """Category service bound to the request session."""
    return CategoryService(db, config)


def get_tag_service(db: DbSession, config: AppSettings) -> TagService:
    """Tag service bound to the request session."""
    return TagService(db, config)


Categories = Annotated[CategoryService, Depends(get_category_service)]
Tags = Annotated[TagService, Depends(get_tag_service)]
