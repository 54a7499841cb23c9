"""Tests for the identity provider client"""

import json
import logging
from unittest.mock import Mock

import pytest
import requests

from authgate.api.identity_client import IdentityClient
from authgate.auth.service import AuthService
from authgate.utils.error_codes import ErrorCode
from authgate.utils.exceptions import (
    ProviderHttpError,
    ProviderNetworkError,
    ProviderParseError,
    ProviderTimeoutError,
)


AUTH_BODY = {
    "access_token": "jwt-access",
    "token_type": "bearer",
    "expires_in": 3600,
    "expires_at": 1700003600,
    "refresh_token": "refresh-1",
    "user": {
        "id": "3f1c-uuid",
        "email": "a@x.com",
        "role": "authenticated",
        "aud": "authenticated",
        "app_metadata": {"provider": "email"},
        "user_metadata": {"username": "alice"},
        "created_at": "2024-01-01T00:00:00Z",
        "email_confirmed_at": None,
        "last_sign_in_at": None,
    },
}


def _response(status_code, body):
    response = requests.Response()
    response.status_code = status_code
    response._content = (body if isinstance(body, str) else json.dumps(body)).encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def http():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(http):
    return IdentityClient(
        "https://proj.supabase.test/",
        "anon-key",
        retry_attempts=3,
        retry_wait=0,
        session=http,
    )


class TestLogin:
    def test_login_maps_response_to_user(self, client, http):
        http.post.return_value = _response(200, AUTH_BODY)

        user = client.login("a@x.com", "secret1")

        assert user.id == "3f1c-uuid"
        assert user.email == "a@x.com"
        assert user.username == "alice"
        assert user.role == "authenticated"
        assert user.access_token == "jwt-access"
        assert user.refresh_token == "refresh-1"
        assert user.expires_at == 1700003600

        args, kwargs = http.post.call_args
        assert args[0] == "https://proj.supabase.test/auth/v1/token?grant_type=password"
        assert kwargs["json"] == {"email": "a@x.com", "password": "secret1"}
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["timeout"] == (10.0, 30.0)

    def test_missing_username_metadata_defaults_to_empty(self, client, http):
        body = dict(AUTH_BODY, user=dict(AUTH_BODY["user"], user_metadata={}))
        http.post.return_value = _response(200, body)

        assert client.login("a@x.com", "secret1").username == ""

    @pytest.mark.parametrize("status", [400, 401])
    def test_credential_statuses(self, client, http, status):
        http.post.return_value = _response(status, {"error": "invalid_grant"})

        with pytest.raises(ProviderHttpError) as exc_info:
            client.login("a@x.com", "wrong-pass")

        assert exc_info.value.status_code == status
        assert exc_info.value.code is ErrorCode.INVALID_CREDENTIALS
        assert "invalid_grant" in exc_info.value.body

    def test_server_error_status(self, client, http):
        http.post.return_value = _response(500, "upstream exploded")

        with pytest.raises(ProviderHttpError) as exc_info:
            client.login("a@x.com", "secret1")

        assert exc_info.value.code is ErrorCode.PROVIDER_HTTP_ERROR
        assert http.post.call_count == 1

    @pytest.mark.parametrize("body", ["<html>oops</html>", "", {"access_token": "x"}])
    def test_unparsable_success_body(self, client, http, body):
        http.post.return_value = _response(200, body)

        with pytest.raises(ProviderParseError) as exc_info:
            client.login("a@x.com", "secret1")

        assert exc_info.value.code is ErrorCode.PROVIDER_PARSE_ERROR

    def test_timeout_is_not_retried(self, client, http):
        http.post.side_effect = requests.exceptions.ReadTimeout("slow")

        with pytest.raises(ProviderTimeoutError) as exc_info:
            client.login("a@x.com", "secret1")

        assert exc_info.value.code is ErrorCode.PROVIDER_TIMEOUT
        assert http.post.call_count == 1

    def test_connect_timeout_is_a_timeout(self, client, http):
        http.post.side_effect = requests.exceptions.ConnectTimeout("slow connect")

        with pytest.raises(ProviderTimeoutError):
            client.login("a@x.com", "secret1")

    def test_connection_error_retried_then_raised(self, client, http):
        http.post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(ProviderNetworkError) as exc_info:
            client.login("a@x.com", "secret1")

        assert exc_info.value.code is ErrorCode.PROVIDER_NETWORK_ERROR
        assert http.post.call_count == 3

    def test_connection_error_recovers_on_retry(self, client, http):
        http.post.side_effect = [
            requests.exceptions.ConnectionError("refused"),
            _response(200, AUTH_BODY),
        ]

        assert client.login("a@x.com", "secret1").id == "3f1c-uuid"
        assert http.post.call_count == 2


class TestRegister:
    def test_register_sends_metadata(self, client, http):
        http.post.return_value = _response(200, AUTH_BODY)

        user = client.register("a@x.com", "secret1", "alice", phone_country_code="+44", phone_number="7700900")

        assert user.username == "alice"
        args, kwargs = http.post.call_args
        assert args[0] == "https://proj.supabase.test/auth/v1/signup"
        assert kwargs["json"] == {
            "email": "a@x.com",
            "password": "secret1",
            "data": {"username": "alice", "phone_country_code": "+44", "phone_number": "7700900"},
        }

    def test_register_omits_absent_phone_fields(self, client, http):
        http.post.return_value = _response(200, AUTH_BODY)

        client.register("a@x.com", "secret1", "alice")

        _, kwargs = http.post.call_args
        assert kwargs["json"]["data"] == {"username": "alice"}

    def test_register_conflict_is_http_error(self, client, http):
        http.post.return_value = _response(422, {"msg": "User already registered"})

        with pytest.raises(ProviderHttpError) as exc_info:
            client.register("a@x.com", "secret1", "alice")

        assert exc_info.value.status_code == 422


class TestLogout:
    def test_logout_sends_bearer_token(self, client, http):
        http.post.return_value = _response(204, "")

        client.logout("jwt-access")

        args, kwargs = http.post.call_args
        assert args[0] == "https://proj.supabase.test/auth/v1/logout"
        assert kwargs["headers"]["Authorization"] == "Bearer jwt-access"
        assert kwargs["headers"]["apikey"] == "anon-key"

    def test_logout_swallows_error_status(self, client, http):
        http.post.return_value = _response(401, {"msg": "invalid token"})
        assert client.logout("expired") is None

    @pytest.mark.parametrize(
        "exc",
        [requests.exceptions.ConnectionError("down"), requests.exceptions.Timeout("slow")],
    )
    def test_logout_swallows_transport_errors(self, client, http, exc):
        http.post.side_effect = exc
        assert client.logout("jwt-access") is None


def test_login_logged_once_across_layers(client, http, store, caplog):
    """Client, service and store together emit a single login event"""
    http.post.return_value = _response(200, AUTH_BODY)
    auth = AuthService(client, store)

    with caplog.at_level(logging.INFO):
        auth.login("a@x.com", "secret1")

    events = [r.msg.get("event", "") for r in caplog.records if isinstance(r.msg, dict)]
    logins = [e for e in events if "logged in" in e.lower() or "login successful" in e.lower()]
    assert logins == ["User logged in"]
    assert "jwt-access" not in caplog.text
