"""User account, session, and verification result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - pydantic resolves field annotations at runtime
from enum import StrEnum

from pydantic import BaseModel, Field


class User(BaseModel, frozen=True):
    """User account stored in the user repository."""

    user_id: str
    username: str
    password_hash: str = Field(repr=False)
    created_at: datetime


@dataclass(frozen=True)
class Session:
    """Persisted session row. Only the token digest is stored, never the raw token."""

    session_id: str
    user_id: str
    session_token_hash: str
    csrf_token: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(frozen=True)
class IssuedSession:
    """Raw values returned once at session creation, for cookie-setting."""

    raw_token: str = field(repr=False)
    raw_csrf: str = field(repr=False)
    expires_at: datetime


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful registration or login."""

    user_id: str
    username: str
    session: IssuedSession

    @property
    def csrf_token(self) -> str:
        return self.session.raw_csrf


class RejectReason(StrEnum):
    NO_SESSION = "NO_SESSION"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class SessionResult:
    """Verification outcome: either an identity or a rejection reason."""

    user_id: str | None = None
    csrf_token: str | None = None
    reason: RejectReason | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def accepted(cls, user_id: str, csrf_token: str) -> SessionResult:
        return cls(user_id=user_id, csrf_token=csrf_token)

    @classmethod
    def rejected(cls, reason: RejectReason) -> SessionResult:
        return cls(reason=reason)
