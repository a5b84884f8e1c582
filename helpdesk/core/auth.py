# helpdesk/core/auth.py
"""Actor identity as forwarded by the upstream authentication provider.

The provider itself sits in front of this service; it identifies the user
through request headers. A request without an id or username has no actor.
"""
from fastapi import Header
from pydantic import BaseModel


class Actor(BaseModel):
    id: str
    username: str
    email: str | None = None
    role: str | None = None


def get_current_actor(
    x_user_id: str | None = Header(default=None),
    x_username: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Actor | None:
    if not x_user_id or not x_username:
        return None
    return Actor(
        id=x_user_id,
        username=x_username,
        email=x_user_email or None,
        role=x_user_role or None,
    )


__all__ = ["Actor", "get_current_actor"]
