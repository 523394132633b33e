"""Starlette AuthenticationBackend that validates the session cookie."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.authentication import AuthCredentials, AuthenticationBackend

from webapp.auth.models import AuthenticatedUser
from webapp.server.cookies import get_csrf_header

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from shared.auth.verifier import SessionVerifier

logger = structlog.get_logger()


class SessionCookieBackend(AuthenticationBackend):
    """Authenticate requests from the session cookie and optional CSRF header.

    A supplied x-csrf-token header must match the session's token; an absent
    one is accepted here and enforced per route by ``csrf_protected``.
    """

    def __init__(self, verifier: SessionVerifier, *, session_cookie_name: str) -> None:
        self._verifier = verifier
        self._session_cookie_name = session_cookie_name

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedUser] | None:
        raw_token = conn.cookies.get(self._session_cookie_name)
        if not raw_token:
            return None

        result = await self._verifier.verify(raw_token, get_csrf_header(conn))
        if not result.ok or result.user_id is None or result.csrf_token is None:
            logger.debug("session rejected", reason=result.reason.value, path=conn.url.path)
            return None

        return AuthCredentials(["authenticated"]), AuthenticatedUser(
            user_id=result.user_id,
            csrf_token=result.csrf_token,
        )
