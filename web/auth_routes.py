"""
FastAPI routes for authentication.

Prefix: /auth

Handlers are plain functions so FastAPI runs them in its threadpool; the
identity provider call and the session file write both block.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from authgate.app import AuthGateApp
from authgate.utils.logger import get_logger

from .auth_deps import get_gateway, get_session_id
from .models import AuthResponse, LoginRequest, MessageResponse, RegisterRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, gateway: AuthGateApp, session_id: str) -> None:
    cookies = gateway.settings.cookies
    response.set_cookie(
        key=cookies.name,
        value=session_id,
        httponly=True,
        secure=cookies.secure,
        samesite="lax",
        path="/",
    )


def _clear_session_cookie(response: Response, gateway: AuthGateApp) -> None:
    cookies = gateway.settings.cookies
    response.set_cookie(
        key=cookies.name,
        value="",
        max_age=0,
        httponly=True,
        secure=cookies.secure,
        samesite="lax",
        path="/",
    )


@router.post("/login", response_model=AuthResponse)
def login(
    req: LoginRequest,
    response: Response,
    gateway: AuthGateApp = Depends(get_gateway),
) -> AuthResponse:
    """Log in with email/password; sets the session cookie"""
    session_id, user = gateway.auth.login(req.email, req.password)
    _set_session_cookie(response, gateway, session_id)
    return AuthResponse.from_user(user)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    req: RegisterRequest,
    response: Response,
    gateway: AuthGateApp = Depends(get_gateway),
) -> AuthResponse:
    """Register a new account; sets the session cookie"""
    session_id, user = gateway.auth.register(
        req.email,
        req.password,
        req.username,
        phone_country_code=req.phone_country_code,
        phone_number=req.phone_number,
    )
    _set_session_cookie(response, gateway, session_id)
    return AuthResponse.from_user(user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    gateway: AuthGateApp = Depends(get_gateway),
) -> MessageResponse:
    """Drop the current session (if any) and clear the cookie"""
    if session_id:
        gateway.auth.logout(session_id)
    else:
        logger.info("Logout called without session cookie")
    _clear_session_cookie(response, gateway)
    return MessageResponse(message="Logged out successfully")
