"""Authentication core: password hashing, tokens, sessions, and verification."""

from shared.auth.clock import Clock, SystemClock
from shared.auth.errors import (
    AuthenticationError,
    AuthError,
    ConflictError,
    EntropySourceError,
    HashingError,
    ValidationError,
)
from shared.auth.models import AuthResult, IssuedSession, RejectReason, Session, SessionResult, User
from shared.auth.password import PasswordHasher, get_hasher
from shared.auth.service import AuthService
from shared.auth.session_store import AuthSessionStore
from shared.auth.settings import AuthSettings
from shared.auth.tokens import TokenGenerator, digest_token, random_token
from shared.auth.verifier import SessionVerifier

__all__ = [
    "AuthError",
    "AuthResult",
    "AuthService",
    "AuthSessionStore",
    "AuthSettings",
    "AuthenticationError",
    "Clock",
    "ConflictError",
    "EntropySourceError",
    "HashingError",
    "IssuedSession",
    "PasswordHasher",
    "RejectReason",
    "Session",
    "SessionResult",
    "SessionVerifier",
    "SystemClock",
    "TokenGenerator",
    "User",
    "ValidationError",
    "digest_token",
    "get_hasher",
    "random_token",
]
