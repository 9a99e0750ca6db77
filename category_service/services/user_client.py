"""User Service Client - verifies bearer tokens against the user service.

The category service does not validate tokens itself: it forwards the
token to ``GET /api/users/profile`` and trusts the profile that comes back.
"""

import httpx

from category_service.config import settings
from category_service.core.exceptions import UnauthorizedError
from category_service.infra.logging import get_logger
from category_service.schemas.user import AuthUser

logger = get_logger(__name__)

PROFILE_PATH = "/api/users/profile"


class UserServiceClient:
    """HTTP client for the user service."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """Initialize user service client.

        Args:
            base_url: User service base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
        """
        self.base_url = base_url or settings.user_service_url
        self.timeout = timeout if timeout is not None else settings.user_service_timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_profile(self, token: str) -> AuthUser:
        """Resolve a bearer token to the user it belongs to.

        Args:
            token: Raw bearer token (without the "Bearer " prefix)

        Returns:
            Authenticated user

        Raises:
            UnauthorizedError: "Invalid token" when the user service answers
                401, "Authentication failed" for any other failure
        """
        client = await self._get_client()

        try:
            response = await client.get(
                PROFILE_PATH,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
            user = AuthUser.model_validate(response.json()["user"])

        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                logger.info("User service rejected token")
                raise UnauthorizedError("Invalid token") from e
            logger.error(
                "User service returned error",
                status_code=e.response.status_code,
                response_text=e.response.text[:500],
            )
            raise UnauthorizedError("Authentication failed") from e

        except Exception as e:
            logger.error(
                "Failed to verify token with user service",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UnauthorizedError("Authentication failed") from e

        logger.debug("Token verified", user_id=user.id, role=user.role)
        return user
