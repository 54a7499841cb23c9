"""Shared fixtures for AuthGate tests"""

from unittest.mock import Mock

import pytest

from authgate.api.identity_client import IdentityClient
from authgate.models.user import User
from authgate.services.session_store import SessionStore
from authgate.utils.config import ProviderSettings, SessionSettings, Settings


def make_user(user_id: str = "u1", **overrides) -> User:
    fields = {
        "id": user_id,
        "email": f"{user_id}@x.com",
        "username": user_id,
        "role": "authenticated",
        "access_token": f"tok-{user_id}",
        "refresh_token": f"rtok-{user_id}",
        "expires_at": 1000,
    }
    fields.update(overrides)
    return User(**fields)


@pytest.fixture
def sessions_file(tmp_path):
    return tmp_path / "data" / "sessions.csv"


@pytest.fixture
def store(sessions_file):
    return SessionStore(path=sessions_file)


@pytest.fixture
def identity():
    """IdentityClient stand-in; tests set login/register return values"""
    return Mock(spec=IdentityClient)


@pytest.fixture
def settings(sessions_file):
    return Settings(
        provider=ProviderSettings(url="http://idp.test", anon_key="anon-key"),
        sessions=SessionSettings(file_path=str(sessions_file)),
    )


@pytest.fixture
def user_factory():
    return make_user
