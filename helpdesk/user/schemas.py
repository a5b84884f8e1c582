# helpdesk/user/schemas.py
from pydantic import BaseModel

from helpdesk.core.auth import Actor
from helpdesk.core.config import get_settings


class UserRecord(BaseModel):
    id: str
    username: str
    email: str
    role: str

    @classmethod
    def from_actor(cls, actor: Actor) -> "UserRecord":
        settings = get_settings()
        return cls(
            id=actor.id,
            username=actor.username,
            email=actor.email or f"{actor.username}@{settings.LOCAL_EMAIL_DOMAIN}",
            role=actor.role or settings.DEFAULT_USER_ROLE,
        )
