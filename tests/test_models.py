"""Tests for user and session records"""

import pytest
from pydantic import ValidationError

from authgate.models.session import SESSION_FIELDS, Session, new_session_id
from web.models import AuthResponse


class TestUser:
    def test_repr_hides_tokens(self, user_factory):
        text = repr(user_factory("u1"))

        assert "tok-u1" not in text
        assert "u1@x.com" in text

    def test_frozen(self, user_factory):
        user = user_factory("u1")
        with pytest.raises(ValidationError):
            user.email = "other@x.com"

    @pytest.mark.parametrize("expires_at,now,expired", [(0, 10**10, False), (1000, 999, False), (1000, 1000, True)])
    def test_is_expired(self, user_factory, expires_at, now, expired):
        assert user_factory("u1", expires_at=expires_at).is_expired(now) is expired

    def test_response_view_has_no_tokens(self, user_factory):
        body = AuthResponse.from_user(user_factory("u1")).model_dump()

        assert body == {"username": "u1", "email": "u1@x.com", "role": "authenticated"}


class TestSession:
    def test_new_session_id_is_cookie_safe(self):
        session_id = new_session_id()

        assert len(session_id) >= 43
        assert all(c.isalnum() or c in "-_" for c in session_id)

    def test_row_layout(self, user_factory):
        session = Session(id="s1", user=user_factory("u1"))

        assert dict(zip(SESSION_FIELDS, session.to_row())) == {
            "session_id": "s1",
            "user_id": "u1",
            "email": "u1@x.com",
            "username": "u1",
            "role": "authenticated",
            "access_token": "tok-u1",
            "refresh_token": "rtok-u1",
            "expires_at": "1000",
        }

    @pytest.mark.parametrize("raw", ["", "abc", "-5"])
    def test_bad_expiry_reads_as_zero(self, raw):
        row = ["s1", "u1", "e", "n", "r", "a", "b", raw]
        assert Session.from_row(row).user.expires_at == 0
