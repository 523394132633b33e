"""Uniform JSON error envelope: ``{"error": {"code", "message", "details"}}``."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from starlette.responses import JSONResponse

BAD_REQUEST = "BAD_REQUEST"
UNAUTHORIZED = "UNAUTHORIZED"
CONFLICT = "CONFLICT"
NOT_FOUND = "NOT_FOUND"
SERVER_ERROR = "SERVER_ERROR"

_CODES_BY_STATUS = {
    HTTPStatus.BAD_REQUEST: BAD_REQUEST,
    HTTPStatus.UNAUTHORIZED: UNAUTHORIZED,
    HTTPStatus.NOT_FOUND: NOT_FOUND,
    HTTPStatus.METHOD_NOT_ALLOWED: BAD_REQUEST,
    HTTPStatus.CONFLICT: CONFLICT,
}


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse({"error": body}, status_code=status_code)


def code_for_status(status_code: int) -> str:
    """Map an HTTP status to an envelope code; unknown 4xx collapse to BAD_REQUEST."""
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return SERVER_ERROR
    return _CODES_BY_STATUS.get(status_code, BAD_REQUEST)


def bad_request(message: str = "Invalid input", details: dict[str, Any] | None = None) -> JSONResponse:
    return error_response(HTTPStatus.BAD_REQUEST, BAD_REQUEST, message, details)


def unauthorized(message: str = "Unauthorized") -> JSONResponse:
    return error_response(HTTPStatus.UNAUTHORIZED, UNAUTHORIZED, message)


def conflict(message: str) -> JSONResponse:
    return error_response(HTTPStatus.CONFLICT, CONFLICT, message)


def server_error() -> JSONResponse:
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, SERVER_ERROR, "Internal server error")
