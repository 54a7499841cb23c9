"""
FastAPI dependencies for session-based authentication.
"""

from typing import Optional

from fastapi import Depends, Request

from authgate.app import AuthGateApp
from authgate.models.user import User
from authgate.utils.exceptions import NotAuthenticatedError


def get_gateway(request: Request) -> AuthGateApp:
    return request.app.state.gateway


def get_session_id(request: Request, gateway: AuthGateApp = Depends(get_gateway)) -> Optional[str]:
    """Extract the session id from the session cookie"""
    return request.cookies.get(gateway.settings.cookies.name) or None


def get_current_user(
    session_id: Optional[str] = Depends(get_session_id),
    gateway: AuthGateApp = Depends(get_gateway),
) -> User:
    """Dependency for protected routes; missing and unknown cookies are both 401"""
    user = gateway.auth.current_user(session_id)
    if user is None:
        raise NotAuthenticatedError()
    return user
