"""Opaque token generation and storage digests.

Raw tokens go to the client; only their SHA-256 digest is persisted, so a
storage leak does not yield usable bearer tokens. The digest is a lookup key,
never a password hash.
"""

from __future__ import annotations

import hashlib
import secrets

from shared.auth.errors import EntropySourceError

SESSION_TOKEN_BYTES = 32
CSRF_TOKEN_BYTES = 16


def random_token(byte_length: int = SESSION_TOKEN_BYTES) -> str:
    """Return ``byte_length`` cryptographically secure random bytes as hex."""
    if byte_length <= 0:
        raise ValueError(f"byte_length must be positive, got {byte_length}")
    try:
        return secrets.token_hex(byte_length)
    except (NotImplementedError, OSError) as exc:
        raise EntropySourceError("secure random source unavailable") from exc


def digest_token(token: str) -> str:
    """Return the deterministic SHA-256 hex digest of a raw token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class TokenGenerator:
    """Mint session and CSRF tokens with configurable sizes."""

    def __init__(
        self,
        *,
        session_token_bytes: int = SESSION_TOKEN_BYTES,
        csrf_token_bytes: int = CSRF_TOKEN_BYTES,
    ) -> None:
        self._session_token_bytes = session_token_bytes
        self._csrf_token_bytes = csrf_token_bytes

    def session_token(self) -> str:
        return random_token(self._session_token_bytes)

    def csrf_token(self) -> str:
        return random_token(self._csrf_token_bytes)

    @staticmethod
    def digest(token: str) -> str:
        return digest_token(token)
