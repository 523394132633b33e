from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette.routing import Route

from shared.auth import AuthService, AuthSessionStore, SessionVerifier
from shared.auth.password import get_hasher
from shared.auth.service import INVALID_SESSION
from shared.auth.settings import AuthSettings
from shared.db import Database, SqliteSessionRepository, SqliteUserRepository
from shared.logging import setup_logging
from webapp.auth.backend import SessionCookieBackend
from webapp.auth.policy import csrf_protected, protected_api, public_route, validate_route_auth_policy
from webapp.server.cookies import CSRF_HEADER_NAME
from webapp.server.middleware import SecurityHeadersMiddleware, SlashNormalizationMiddleware
from webapp.server.settings import WebAppSettings
from webapp.views import change_password, health, login, logout, me, register
from webapp.views.errors import code_for_status, error_response, server_error

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request

    from shared.auth.clock import Clock
    from shared.auth.password import PasswordHasher


async def _http_error_handler(_request: Request, exc: Exception) -> Response:
    """Render HTTP exceptions (401 from auth policies, 404, 405) as the JSON error envelope."""
    http_exc = cast("HTTPException", exc)
    if http_exc.status_code in {HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED}:
        return Response(status_code=http_exc.status_code, headers=http_exc.headers)
    if http_exc.status_code == HTTPStatus.UNAUTHORIZED:
        message = INVALID_SESSION
    else:
        message = http_exc.detail
    response = error_response(http_exc.status_code, code_for_status(http_exc.status_code), message)
    if http_exc.headers:
        response.headers.update(http_exc.headers)
    return response


async def _server_error_handler(request: Request, exc: Exception) -> Response:
    """Log unexpected failures and answer with an opaque 500."""
    logger.error(
        "unhandled error",
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    return server_error()


def create_app(
    settings: WebAppSettings | None = None,
    auth_settings: AuthSettings | None = None,
    *,
    clock: Clock | None = None,
    password_hasher: PasswordHasher | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = WebAppSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()

    routes = [
        # Public routes
        Route("/health", public_route(health), methods=["GET"], name="health"),
        Route("/auth/register", public_route(register), methods=["POST"], name="register"),
        Route("/auth/login", public_route(login), methods=["POST"], name="login"),
        Route("/auth/logout", public_route(logout), methods=["POST"], name="logout"),
        # Protected JSON routes (401 envelope when unauthenticated)
        Route("/auth/me", protected_api(me), methods=["GET"], name="me"),
        Route("/auth/password", csrf_protected(change_password), methods=["POST"], name="change_password"),
    ]
    validate_route_auth_policy(routes)

    # Initialize database and auth components
    db = Database(auth_settings.database_path)
    db.connect()
    user_repo = SqliteUserRepository(db)
    session_store = AuthSessionStore(
        SqliteSessionRepository(db),
        ttl=auth_settings.session_ttl,
        clock=clock,
        cleanup_interval_seconds=auth_settings.session_cleanup_interval_seconds,
    )
    verifier = SessionVerifier(session_store)
    hasher = password_hasher or get_hasher(auth_settings.password_hasher)
    auth_service = AuthService(user_repo, session_store, verifier, password_hasher=hasher)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        await auth_service.prime_dummy_hash()
        session_store.start_cleanup()
        try:
            yield
        finally:
            await session_store.stop_cleanup()
            db.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            HTTPException: _http_error_handler,
            Exception: _server_error_handler,
        },
    )
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(
        AuthenticationMiddleware,  # type: ignore[arg-type]
        backend=SessionCookieBackend(verifier, session_cookie_name=auth_settings.session_cookie_name),
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", CSRF_HEADER_NAME],
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=auth_settings.production)  # type: ignore[arg-type]

    app.state.db = db
    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.session_store = session_store
    app.state.auth_service = auth_service

    logger.info("webapp server ready", hasher=type(hasher).__name__)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory webapp.server.app:get_app."""
    s = WebAppSettings()
    auth = AuthSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=auth)
