"""Exception handlers: map errors to JSON error responses"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authgate.utils.error_codes import ErrorCode
from authgate.utils.exceptions import (
    AuthGateError,
    IdentityProviderError,
    InvalidCredentialsError,
    NotAuthenticatedError,
)
from authgate.utils.logger import get_logger

from .models import ErrorResponse

logger = get_logger(__name__)


def error_response(code: ErrorCode, field: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(code=code.value, message=code.message, field=field)
    return JSONResponse(status_code=code.status, content=body.model_dump(exclude_none=True))


def _first_invalid_field(exc: RequestValidationError) -> str:
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            return loc[0]
    return "unknown"


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    field = _first_invalid_field(exc)
    errors = exc.errors()
    message = errors[0].get("msg", "Validation failed") if errors else "Validation failed"
    logger.warning(
        "Validation error",
        error_code=ErrorCode.VALIDATION_FAILED.value,
        field=field,
        message=message,
        path=request.url.path,
    )
    return error_response(ErrorCode.VALIDATION_FAILED, field=field)


async def handle_authgate_error(request: Request, exc: AuthGateError) -> JSONResponse:
    code = exc.code
    if isinstance(exc, (InvalidCredentialsError, NotAuthenticatedError)):
        logger.warning("Authentication failed", error_code=code.value, path=request.url.path)
    elif isinstance(exc, IdentityProviderError):
        logger.error("External auth service error", error_code=code.value, provider_error=str(exc))
    else:
        logger.error("Request failed", error_code=code.value, error=str(exc))
    return error_response(code)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(AuthGateError, handle_authgate_error)
