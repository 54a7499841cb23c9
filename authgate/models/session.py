"""Session record linking an opaque session id to a user"""

import secrets
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict

from .user import User


SESSION_FIELDS = (
    "session_id",
    "user_id",
    "email",
    "username",
    "role",
    "access_token",
    "refresh_token",
    "expires_at",
)


def _one_line(value: str) -> str:
    """Records are one physical line each"""
    return value.replace("\r", " ").replace("\n", " ")


def new_session_id() -> str:
    """256-bit random id, safe as a cookie value"""
    return secrets.token_urlsafe(32)


def _parse_expires_at(raw: str) -> int:
    try:
        value = int(raw.strip())
    except (TypeError, ValueError):
        return 0
    return value if value >= 0 else 0


class Session(BaseModel):
    """A session owns its own copy of the user record"""

    model_config = ConfigDict(frozen=True)

    id: str
    user: User

    @classmethod
    def new(cls, user: User) -> "Session":
        return cls(id=new_session_id(), user=user.model_copy())

    def to_row(self) -> List[str]:
        u = self.user
        fields = [self.id, u.id, u.email, u.username, u.role, u.access_token, u.refresh_token]
        return [_one_line(f) for f in fields] + [str(u.expires_at)]

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "Session":
        """Build from a persisted row; callers skip rows shorter than SESSION_FIELDS"""
        user = User(
            id=row[1],
            email=row[2],
            username=row[3],
            role=row[4],
            access_token=row[5],
            refresh_token=row[6],
            expires_at=_parse_expires_at(row[7]),
        )
        return cls(id=row[0], user=user)
