"""Error taxonomy for the authentication core.

AuthError subclasses are expected, caller-facing failures. HashingError and
EntropySourceError are infrastructure failures: they propagate unchanged and
surface as an opaque server error.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for expected authentication and registration failures."""


class ValidationError(AuthError):
    """Malformed input the caller can fix (field-level detail is safe to return)."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message

    @property
    def details(self) -> dict[str, str]:
        return {self.field: self.message}


class ConflictError(AuthError):
    """Username is already taken."""


class AuthenticationError(AuthError):
    """Uniform rejection for bad credentials, bad sessions, and bad CSRF tokens.

    The message never says which check failed.
    """


class HashingError(RuntimeError):
    """The password hasher failed internally (resources, parameters)."""


class EntropySourceError(RuntimeError):
    """The operating system's secure random source is unavailable."""
