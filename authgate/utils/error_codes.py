"""Error codes, client-safe messages and HTTP status mapping"""

from enum import Enum


class ErrorCode(str, Enum):
    """Codes sent to clients in error responses"""

    # Auth
    INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    NOT_AUTHENTICATED = "AUTH_NOT_AUTHENTICATED"
    # Identity provider
    PROVIDER_HTTP_ERROR = "PROVIDER_HTTP_ERROR"
    PROVIDER_NETWORK_ERROR = "PROVIDER_NETWORK_ERROR"
    PROVIDER_PARSE_ERROR = "PROVIDER_PARSE_ERROR"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    # Validation
    VALIDATION_FAILED = "VALIDATION_FAILED"
    # Server
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @property
    def status(self) -> int:
        return _STATUS[self]


_MESSAGES = {
    ErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorCode.NOT_AUTHENTICATED: "Not authenticated",
    ErrorCode.PROVIDER_HTTP_ERROR: "Authentication service error",
    ErrorCode.PROVIDER_NETWORK_ERROR: "Unable to reach authentication service",
    ErrorCode.PROVIDER_PARSE_ERROR: "Authentication service returned invalid data",
    ErrorCode.PROVIDER_TIMEOUT: "Authentication service timed out",
    ErrorCode.VALIDATION_FAILED: "Invalid input data",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
}

_STATUS = {
    ErrorCode.INVALID_CREDENTIALS: 401,
    ErrorCode.NOT_AUTHENTICATED: 401,
    ErrorCode.PROVIDER_HTTP_ERROR: 502,
    ErrorCode.PROVIDER_NETWORK_ERROR: 502,
    ErrorCode.PROVIDER_PARSE_ERROR: 502,
    ErrorCode.PROVIDER_TIMEOUT: 504,
    ErrorCode.VALIDATION_FAILED: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}
