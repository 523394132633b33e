"""Auth endpoints: register, login, logout, who-am-I, password change, health."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from starlette.responses import JSONResponse

from shared.auth.errors import AuthenticationError, ConflictError, ValidationError
from shared.auth.service import INVALID_SESSION
from webapp.server.cookies import clear_session_cookies, get_csrf_header, set_session_cookies
from webapp.views.errors import bad_request, conflict, unauthorized

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.models import AuthResult
    from shared.auth.service import AuthService
    from shared.auth.settings import AuthSettings


async def _parse_json_body(request: Request) -> dict[str, Any] | None:
    """Parse JSON body from request. Return None on failure."""
    try:
        body = await request.json()
    except (ValueError, json.JSONDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    return body


def _string_fields(body: dict[str, Any], *names: str) -> tuple[str, ...] | None:
    """Return the named fields if all of them are strings, otherwise None."""
    values = tuple(body.get(name) for name in names)
    if not all(isinstance(value, str) for value in values):
        return None
    return values  # type: ignore[return-value]


def _user_payload(user_id: str, username: str) -> dict[str, str]:
    return {"id": user_id, "username": username}


def _session_response(result: AuthResult, auth_settings: AuthSettings) -> JSONResponse:
    """Build the signed-in response body and attach session + CSRF cookies."""
    response = JSONResponse(
        {"user": _user_payload(result.user_id, result.username), "csrfToken": result.csrf_token},
    )
    set_session_cookies(
        response,
        result.session,
        session_cookie_name=auth_settings.session_cookie_name,
        cookie_secure=auth_settings.cookie_secure,
    )
    return response


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def register(request: Request) -> JSONResponse:
    """POST /auth/register - create an account and sign it in."""
    auth_service: AuthService = request.app.state.auth_service
    body = await _parse_json_body(request)
    fields = _string_fields(body, "username", "password") if body is not None else None
    if fields is None:
        return bad_request()
    username, password = fields

    try:
        result = await auth_service.register(username, password)
    except ValidationError as e:
        return bad_request(str(e), e.details)
    except ConflictError as e:
        return conflict(str(e))

    return _session_response(result, request.app.state.auth_settings)


async def login(request: Request) -> JSONResponse:
    """POST /auth/login - validate credentials and start a session."""
    auth_service: AuthService = request.app.state.auth_service
    body = await _parse_json_body(request)
    fields = _string_fields(body, "username", "password") if body is not None else None
    if fields is None:
        return bad_request()
    username, password = fields

    try:
        result = await auth_service.login(username, password)
    except ValidationError as e:
        return bad_request(str(e), e.details)
    except AuthenticationError as e:
        return unauthorized(str(e))

    return _session_response(result, request.app.state.auth_settings)


async def logout(request: Request) -> JSONResponse:
    """POST /auth/logout - revoke the session (if any) and clear cookies."""
    auth_service: AuthService = request.app.state.auth_service
    auth_settings: AuthSettings = request.app.state.auth_settings

    await auth_service.logout(request.cookies.get(auth_settings.session_cookie_name))

    response = JSONResponse({"ok": True})
    clear_session_cookies(response, session_cookie_name=auth_settings.session_cookie_name)
    return response


async def me(request: Request) -> JSONResponse:
    """GET /auth/me - the session owner and the session's CSRF token."""
    auth_service: AuthService = request.app.state.auth_service
    user = await auth_service.get_user(request.user.user_id)
    if user is None:
        return unauthorized(INVALID_SESSION)
    return JSONResponse(
        {"user": _user_payload(user.user_id, user.username), "csrfToken": request.user.csrf_token},
    )


async def change_password(request: Request) -> JSONResponse:
    """POST /auth/password - replace the caller's password."""
    auth_service: AuthService = request.app.state.auth_service
    auth_settings: AuthSettings = request.app.state.auth_settings
    body = await _parse_json_body(request)
    fields = _string_fields(body, "currentPassword", "newPassword") if body is not None else None
    if fields is None:
        return bad_request()
    current_password, new_password = fields

    try:
        await auth_service.change_password(
            request.cookies.get(auth_settings.session_cookie_name),
            get_csrf_header(request),
            current_password,
            new_password,
        )
    except ValidationError as e:
        return bad_request(str(e), e.details)
    except AuthenticationError as e:
        return unauthorized(str(e))

    return JSONResponse({"ok": True})
