"""Authenticated user as reported by the user service."""

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """Profile returned by ``GET /api/users/profile``.

    Only the fields used for role gating are kept; the user service may
    send more.
    """

    id: str
    email: str
    username: str
    role: str

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)
