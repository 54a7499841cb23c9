"""FastAPI routes for the current user and gateway metadata"""

from typing import List

from fastapi import APIRouter, Depends

from authgate.app import AuthGateApp
from authgate.models.user import User

from .auth_deps import get_current_user, get_gateway
from .models import AppInfoResponse, HealthResponse, UserResponse

router = APIRouter(tags=["user"])


@router.get("/user/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the user behind the session cookie"""
    return UserResponse.from_user(current_user)


@router.get("/apps", response_model=List[AppInfoResponse])
def list_apps(gateway: AuthGateApp = Depends(get_gateway)) -> List[AppInfoResponse]:
    return [AppInfoResponse(id=a.id, name=a.name, description=a.description) for a in gateway.apps]


@router.get("/health", response_model=HealthResponse)
def health(gateway: AuthGateApp = Depends(get_gateway)) -> HealthResponse:
    return HealthResponse(status="ok", sessions=gateway.sessions.count())
