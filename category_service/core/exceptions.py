"""Service error kinds.

Services raise these; ``main.py`` turns them into ``{"error": message}``
responses carrying ``status_code``.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    """Malformed input (bad body, bad query, unusable name)."""

    status_code = 400


class UnauthorizedError(ServiceError):
    """Missing or rejected bearer token."""

    status_code = 401


class ForbiddenError(ServiceError):
    """Authenticated user lacks the required role."""

    status_code = 403


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""

    status_code = 404


class ConflictError(ServiceError):
    """Business rule violation (children present, cycle, slug race lost)."""

    status_code = 409


class SlugGenerationError(ServiceError):
    """Slug existence check failed; allocation aborted."""

    status_code = 500
