"""Identity provider request/response types"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.user import User


# Provider API paths
AUTH_PATH = "/auth/v1/token?grant_type=password"
SIGNUP_PATH = "/auth/v1/signup"
LOGOUT_PATH = "/auth/v1/logout"


class LoginBody(BaseModel):
    email: str
    password: str


class RegisterMetadata(BaseModel):
    username: str
    phone_country_code: Optional[str] = None
    phone_number: Optional[str] = None


class RegisterBody(BaseModel):
    email: str
    password: str
    data: RegisterMetadata


class ProviderUser(BaseModel):
    """User object embedded in provider auth responses"""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str = ""
    role: str = ""
    aud: Optional[str] = None
    app_metadata: Dict[str, Any] = Field(default_factory=dict)
    user_metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = None
    email_confirmed_at: Optional[str] = None
    last_sign_in_at: Optional[str] = None


class ProviderAuthResponse(BaseModel):
    """Successful token/signup response"""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: int = 0
    expires_at: int = 0
    refresh_token: str
    user: ProviderUser

    def to_user(self) -> User:
        username = self.user.user_metadata.get("username")
        return User(
            id=self.user.id,
            email=self.user.email,
            username=username if isinstance(username, str) else "",
            role=self.user.role,
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=max(self.expires_at, 0),
        )
