"""API request/response models for the auth gateway"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from authgate.models.user import User


class LoginRequest(BaseModel):
    """Request model for POST /auth/login"""
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)


class RegisterRequest(BaseModel):
    """Request model for POST /auth/register"""
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    username: str = Field(..., min_length=3, max_length=50)
    phone_country_code: Optional[str] = Field(default=None, max_length=5)
    phone_number: Optional[str] = Field(default=None, max_length=20)


class UserResponse(BaseModel):
    """Safe user view: no tokens"""
    username: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(username=user.username, email=user.email, role=user.role)


class AuthResponse(UserResponse):
    """Returned by login and register"""
    pass


class MessageResponse(BaseModel):
    message: str


class AppInfoResponse(BaseModel):
    id: str
    name: str
    description: str


class HealthResponse(BaseModel):
    status: str
    sessions: int


class ErrorResponse(BaseModel):
    """JSON body for every error response"""
    code: str
    message: str
    field: Optional[str] = None
