"""User model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from starlette.authentication import BaseUser


class AuthenticatedUser(BaseUser):
    """Authenticated caller for Starlette's request.user.

    Created by the auth backend from a verified session cookie. Carries the
    session's CSRF token so handlers can echo it back to the client.
    """

    def __init__(self, user_id: str, csrf_token: str) -> None:
        self._user_id = user_id
        self._csrf_token = csrf_token

    @property
    def is_authenticated(self) -> bool:  # pragma: no cover
        return True

    @property
    def display_name(self) -> str:  # pragma: no cover
        return self._user_id

    @property
    def identity(self) -> str:  # pragma: no cover
        return self._user_id

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def csrf_token(self) -> str:
        return self._csrf_token
