"""Custom exceptions for AuthGate"""

from typing import Optional

from .error_codes import ErrorCode


class AuthGateError(Exception):
    """Base exception for AuthGate"""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR


class ConfigError(AuthGateError):
    """Configuration error"""
    pass


class InvalidCredentialsError(AuthGateError):
    """Identity provider rejected the credentials"""

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class NotAuthenticatedError(AuthGateError):
    """Request carries no valid session"""

    code = ErrorCode.NOT_AUTHENTICATED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class IdentityProviderError(AuthGateError):
    """Error from the identity provider API"""

    code = ErrorCode.PROVIDER_HTTP_ERROR


class ProviderHttpError(IdentityProviderError):
    """Provider answered with a non-success HTTP status"""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Provider HTTP {status_code} - {body}")

    @property
    def code(self) -> ErrorCode:  # type: ignore[override]
        if self.status_code in (400, 401):
            return ErrorCode.INVALID_CREDENTIALS
        return ErrorCode.PROVIDER_HTTP_ERROR

    @property
    def is_credentials_error(self) -> bool:
        return self.code is ErrorCode.INVALID_CREDENTIALS


class ProviderNetworkError(IdentityProviderError):
    """Provider could not be reached"""

    code = ErrorCode.PROVIDER_NETWORK_ERROR


class ProviderTimeoutError(IdentityProviderError):
    """Provider did not answer in time"""

    code = ErrorCode.PROVIDER_TIMEOUT


class ProviderParseError(IdentityProviderError):
    """Provider answered with a body we could not understand"""

    code = ErrorCode.PROVIDER_PARSE_ERROR

    def __init__(self, body: str = "", detail: Optional[str] = None):
        self.body = body
        message = "Provider parse error"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
