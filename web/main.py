"""FastAPI application for the AuthGate gateway"""

import time
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from authgate.app import AuthGateApp
from authgate.utils.logger import get_logger

from .auth_routes import router as auth_router
from .errors import register_exception_handlers
from .user_routes import router as user_router

logger = get_logger(__name__)

SECURITY_HEADERS = [
    (b"content-security-policy", b"frame-ancestors 'none'"),
    (b"x-frame-options", b"DENY"),
]


class RequestLogMiddlewareASGI:
    """Raw ASGI middleware: access log line per request plus anti-framing headers."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers") or [])
                present = {k.lower() for k, _ in headers}
                for key, value in SECURITY_HEADERS:
                    if key not in present:
                        headers.append((key, value))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            client = scope.get("client")
            logger.info(
                "Request handled",
                method=scope.get("method"),
                path=scope.get("path"),
                status=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                client=client[0] if client else None,
            )


def create_app(gateway: Optional[AuthGateApp] = None) -> FastAPI:
    """Build the FastAPI app around an AuthGateApp (created from settings when omitted)"""
    gateway = gateway or AuthGateApp()

    app = FastAPI(
        title=f"{gateway.name} API",
        description="Session gateway in front of a hosted identity provider",
        version=gateway.version,
    )
    app.state.gateway = gateway

    origins = gateway.settings.server.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestLogMiddlewareASGI)

    register_exception_handlers(app)
    app.include_router(auth_router)
    app.include_router(user_router)

    logger.info("Routes configured", cors_origins=origins)
    return app
