"""Session and CSRF cookie helpers for the double-submit pattern.

The session cookie carries the raw bearer token and is HttpOnly. The CSRF
cookie is readable by client script, which echoes it in the x-csrf-token
header on state-changing requests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection
    from starlette.responses import Response

    from shared.auth.models import IssuedSession

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "x-csrf-token"


def set_session_cookies(
    response: Response,
    issued: IssuedSession,
    *,
    session_cookie_name: str,
    cookie_secure: bool,
) -> None:
    """Set the session and CSRF cookies, both expiring with the session."""
    response.set_cookie(
        key=session_cookie_name,
        value=issued.raw_token,
        httponly=True,
        samesite="lax",
        secure=cookie_secure,
        path="/",
        expires=issued.expires_at,
    )
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=issued.raw_csrf,
        httponly=False,
        samesite="lax",
        secure=cookie_secure,
        path="/",
        expires=issued.expires_at,
    )


def clear_session_cookies(response: Response, *, session_cookie_name: str) -> None:
    response.delete_cookie(key=session_cookie_name, path="/")
    response.delete_cookie(key=CSRF_COOKIE_NAME, path="/")


def get_csrf_header(conn: HTTPConnection) -> str | None:
    return conn.headers.get(CSRF_HEADER_NAME) or None
