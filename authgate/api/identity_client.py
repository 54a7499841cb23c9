"""Identity provider (Supabase-compatible auth API) client"""

from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..models.user import User
from ..utils.exceptions import (
    IdentityProviderError,
    ProviderHttpError,
    ProviderNetworkError,
    ProviderParseError,
    ProviderTimeoutError,
)
from ..utils.logger import get_logger
from .identity_types import (
    AUTH_PATH,
    LOGOUT_PATH,
    SIGNUP_PATH,
    LoginBody,
    ProviderAuthResponse,
    RegisterBody,
    RegisterMetadata,
)

logger = get_logger(__name__)


class IdentityClient:
    """Client for the identity provider's password, signup and logout endpoints"""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        connection_timeout: float = 10.0,
        read_timeout: float = 30.0,
        retry_attempts: int = 3,
        retry_wait: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        # Use tuple timeout: (connect_timeout, read_timeout)
        self.timeout = (connection_timeout, read_timeout)
        self.retry_attempts = max(1, retry_attempts)
        self.retry_wait = retry_wait
        self.session = session or requests.Session()
        logger.info("Identity client initialized", url=self.base_url)

    def __repr__(self) -> str:
        return f"IdentityClient(url={self.base_url})"

    def _post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        POST to the provider, retrying connection failures.

        Raises:
            ProviderTimeoutError: request timed out
            ProviderNetworkError: provider unreachable after all attempts
        """
        url = f"{self.base_url}{path}"
        request_headers = {"apikey": self.anon_key}
        if json is not None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_wait, min=0, max=10),
            retry=retry_if_exception_type(ProviderNetworkError),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._send(url, json, request_headers, path)
        raise ProviderNetworkError(f"No attempt made for {path}")  # pragma: no cover

    def _send(
        self,
        url: str,
        json: Optional[Dict[str, Any]],
        headers: Dict[str, str],
        path: str,
    ) -> requests.Response:
        logger.debug("Sending request to identity provider", endpoint=path)
        try:
            response = self.session.post(url, json=json, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error("Identity provider timeout", endpoint=path, timeout=self.timeout)
            raise ProviderTimeoutError(f"Provider timeout: {e}")
        except requests.exceptions.RequestException as e:
            logger.warning("Identity provider request failed", endpoint=path, error=str(e))
            raise ProviderNetworkError(f"Provider network error: {e}")

        logger.debug(
            "Received response from identity provider",
            endpoint=path,
            status_code=response.status_code,
        )
        return response

    @staticmethod
    def _parse_auth_response(response: requests.Response) -> User:
        if not 200 <= response.status_code < 300:
            raise ProviderHttpError(response.status_code, response.text)

        body = response.text
        try:
            parsed = ProviderAuthResponse.model_validate_json(body)
        except PydanticValidationError as e:
            raise ProviderParseError(body, detail=f"{e.error_count()} invalid field(s)")
        return parsed.to_user()

    def login(self, email: str, password: str) -> User:
        """Exchange email/password for tokens and the provider's user record"""
        response = self._post(
            AUTH_PATH,
            json=LoginBody(email=email, password=password).model_dump(),
        )
        return self._parse_auth_response(response)

    def register(
        self,
        email: str,
        password: str,
        username: str,
        phone_country_code: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> User:
        """Sign up a new user with profile metadata"""
        body = RegisterBody(
            email=email,
            password=password,
            data=RegisterMetadata(
                username=username,
                phone_country_code=phone_country_code,
                phone_number=phone_number,
            ),
        )
        response = self._post(SIGNUP_PATH, json=body.model_dump(exclude_none=True))
        return self._parse_auth_response(response)

    def logout(self, access_token: str) -> None:
        """Invalidate the access token with the provider.

        Best-effort: failures are logged and never raised.
        """
        try:
            response = self._post(
                LOGOUT_PATH,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except IdentityProviderError as e:
            logger.warning("Failed to notify identity provider of logout", error=str(e))
            return

        if 200 <= response.status_code < 300:
            logger.info("Identity provider logout successful")
        else:
            logger.warning(
                "Identity provider logout returned non-success status",
                status_code=response.status_code,
            )
