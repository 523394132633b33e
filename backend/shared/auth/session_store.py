"""Session store: token issuance, digest lookup, revocation, and expiry cleanup."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from shared.auth.clock import SystemClock
from shared.auth.models import IssuedSession, Session
from shared.auth.tokens import TokenGenerator

if TYPE_CHECKING:
    from shared.auth.clock import Clock
    from shared.dal.session_repository import SessionRepository

CLEANUP_INTERVAL_SECONDS = 300  # 5 minutes
DEFAULT_SESSION_TTL = timedelta(days=30)

logger = structlog.get_logger()


class AuthSessionStore:
    """Persisted sessions keyed by the digest of the client's bearer token.

    The raw token exists only in the value returned by create(); rows hold
    its digest. Expired rows are evicted lazily by the verifier. The
    periodic cleanup task is optional storage hygiene: call start_cleanup()
    on app startup and stop_cleanup() on shutdown.
    """

    def __init__(
        self,
        repository: SessionRepository,
        *,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Clock | None = None,
        tokens: TokenGenerator | None = None,
        cleanup_interval_seconds: float = CLEANUP_INTERVAL_SECONDS,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("session ttl must be positive")
        self._repository = repository
        self._ttl = ttl
        self._clock = clock or SystemClock()
        self._tokens = tokens or TokenGenerator()
        self._cleanup_interval_seconds = cleanup_interval_seconds
        self._cleanup_task: asyncio.Task[None] | None = None

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def tokens(self) -> TokenGenerator:
        return self._tokens

    async def create(self, user_id: str) -> IssuedSession:
        """Mint a bearer token and CSRF token for ``user_id`` and persist the session."""
        raw_token = self._tokens.session_token()
        raw_csrf = self._tokens.csrf_token()
        now = self._clock.now()
        session = Session(
            session_id=str(uuid4()),
            user_id=user_id,
            session_token_hash=self._tokens.digest(raw_token),
            csrf_token=raw_csrf,
            expires_at=now + self._ttl,
            created_at=now,
        )
        await self._repository.create_session(session)
        logger.info("session created", user_id=user_id, expires_at=session.expires_at.isoformat())
        return IssuedSession(raw_token=raw_token, raw_csrf=raw_csrf, expires_at=session.expires_at)

    async def find_by_token_digest(self, digest: str) -> Session | None:
        """Return the stored session for a token digest, expired or not."""
        return await self._repository.get_by_token_hash(digest)

    async def delete_by_token_digest(self, digest: str) -> None:
        """Revoke a session (logout). No-op when absent."""
        await self._repository.delete_by_token_hash(digest)

    async def delete_by_id(self, session_id: str) -> None:
        await self._repository.delete_by_id(session_id)

    async def cleanup_expired(self) -> int:
        """Remove all expired sessions. Return count of removed sessions."""
        removed = await self._repository.delete_expired(self._clock.now())
        if removed:
            logger.info("cleaned up expired sessions", count=removed)
        return removed

    def start_cleanup(self) -> None:
        """Start the periodic cleanup background task (disabled when the interval is 0)."""
        if self._cleanup_interval_seconds <= 0:
            return
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop_cleanup(self) -> None:
        """Stop the periodic cleanup background task."""
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._cleanup_task
            self._cleanup_task = None

    async def _cleanup_loop(self) -> None:
        """Periodically remove expired sessions."""
        while True:
            await asyncio.sleep(self._cleanup_interval_seconds)
            try:
                await self.cleanup_expired()
            except Exception:
                logger.exception("session cleanup failed")
