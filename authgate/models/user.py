"""User data model carried by sessions"""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Authenticated user as returned by the identity provider.

    access_token and refresh_token are server-side secrets; they are hidden
    from repr and must never be copied into a client-facing response.
    """

    model_config = ConfigDict(frozen=True)  # Immutable for thread safety

    id: str
    email: str = ""
    username: str = ""
    role: str = ""
    access_token: str = Field(default="", repr=False)
    refresh_token: str = Field(default="", repr=False)
    expires_at: int = Field(default=0, ge=0)  # epoch seconds, 0 when unknown

    def is_expired(self, now: float) -> bool:
        """True when the provider token has a known expiry that has passed"""
        return self.expires_at > 0 and self.expires_at <= now
