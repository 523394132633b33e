"""Tests for session and CSRF cookie helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from starlette.responses import Response

from shared.auth.models import IssuedSession
from webapp.server.cookies import CSRF_COOKIE_NAME, clear_session_cookies, set_session_cookies

EXPIRES = datetime.now(tz=UTC) + timedelta(days=30)


def _cookies(response: Response) -> dict[str, str]:
    headers = [value.decode() for key, value in response.raw_headers if key == b"set-cookie"]
    return {header.split("=", 1)[0]: header.lower() for header in headers}


def _issue(response: Response, *, secure: bool) -> dict[str, str]:
    issued = IssuedSession(raw_token="t" * 64, raw_csrf="c" * 32, expires_at=EXPIRES)
    set_session_cookies(response, issued, session_cookie_name="session_token", cookie_secure=secure)
    return _cookies(response)


class TestSetSessionCookies:
    def test_sets_both_cookies(self):
        cookies = _issue(Response(), secure=False)

        assert cookies["session_token"].startswith("session_token=" + "t" * 64)
        assert cookies[CSRF_COOKIE_NAME].startswith("csrf_token=" + "c" * 32)

    def test_only_session_cookie_is_httponly(self):
        cookies = _issue(Response(), secure=False)

        assert "httponly" in cookies["session_token"]
        assert "httponly" not in cookies[CSRF_COOKIE_NAME]

    def test_shared_attributes(self):
        for cookie in _issue(Response(), secure=False).values():
            assert "samesite=lax" in cookie
            assert "path=/" in cookie
            assert f"expires={EXPIRES.strftime('%a, %d %b %Y')}".lower() in cookie

    def test_secure_in_production(self):
        for cookie in _issue(Response(), secure=True).values():
            assert "; secure" in cookie

    def test_not_secure_in_development(self):
        for cookie in _issue(Response(), secure=False).values():
            assert "; secure" not in cookie


class TestClearSessionCookies:
    def test_expires_both_cookies(self):
        response = Response()
        clear_session_cookies(response, session_cookie_name="session_token")

        cookies = _cookies(response)
        assert set(cookies) == {"session_token", CSRF_COOKIE_NAME}
        for cookie in cookies.values():
            assert "max-age=0" in cookie
            assert "path=/" in cookie
