"""Session verification: bearer cookie plus optional CSRF header to identity.

Transitions per attempt::

    no token                     -> NO_SESSION
    digest not found             -> NO_SESSION
    found, expires_at <= now     -> evict row, EXPIRED
    found, live, header mismatch -> NO_SESSION
    found, live, header absent   -> accepted (an empty header counts as absent)
    found, live, header matches  -> accepted

"Never existed" and "revoked" are indistinguishable, and a CSRF mismatch does
not reveal that the session itself was valid. The header is optional here:
which endpoints must send it is decided by the caller.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

import structlog

from shared.auth.models import RejectReason, SessionResult

if TYPE_CHECKING:
    from shared.auth.session_store import AuthSessionStore

logger = structlog.get_logger()


class SessionVerifier:
    """Decide whether a raw session token (and CSRF header) authenticates a caller."""

    def __init__(self, session_store: AuthSessionStore) -> None:
        self._store = session_store

    async def verify(self, raw_token: str | None, csrf_header: str | None = None) -> SessionResult:
        if not raw_token:
            return SessionResult.rejected(RejectReason.NO_SESSION)

        digest = self._store.tokens.digest(raw_token)
        session = await self._store.find_by_token_digest(digest)
        if session is None:
            return SessionResult.rejected(RejectReason.NO_SESSION)

        if session.is_expired(self._store.clock.now()):
            await self._store.delete_by_id(session.session_id)
            logger.info("session expired, evicted", user_id=session.user_id)
            return SessionResult.rejected(RejectReason.EXPIRED)

        if csrf_header and not secrets.compare_digest(
            csrf_header.encode("utf-8"),
            session.csrf_token.encode("utf-8"),
        ):
            logger.warning("csrf token mismatch", user_id=session.user_id)
            return SessionResult.rejected(RejectReason.NO_SESSION)

        return SessionResult.accepted(user_id=session.user_id, csrf_token=session.csrf_token)
