"""SQLite-backed session repository."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING

from shared.auth.models import Session
from shared.dal.session_repository import SessionRepository
from shared.db.connection import from_db_timestamp, to_db_timestamp

if TYPE_CHECKING:
    from datetime import datetime

    from shared.db.connection import Database


class SqliteSessionRepository(SessionRepository):
    """SQLite implementation of SessionRepository.

    Digest uniqueness is enforced by ``idx_sessions_token_hash``; writes are
    serialized by an asyncio lock over the shared connection.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_session(self, session: Session) -> None:
        """Insert a session. Raises ValueError on a duplicate id or token digest."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO sessions (id, user_id, session_token_hash, csrf_token, expires_at, created_at) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        session.session_id,
                        session.user_id,
                        session.session_token_hash,
                        session.csrf_token,
                        to_db_timestamp(session.expires_at),
                        to_db_timestamp(session.created_at),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                error_msg = str(exc).lower()
                if "session_token_hash" in error_msg or "idx_sessions_token_hash" in error_msg:
                    raise ValueError("Session token digest already in use") from exc
                if "sessions.id" in error_msg:
                    raise ValueError(f"Session with id '{session.session_id}' already exists") from exc
                raise ValueError(str(exc)) from exc

    async def get_by_token_hash(self, token_hash: str) -> Session | None:
        row = self._db.connection.execute(
            "SELECT id, user_id, session_token_hash, csrf_token, expires_at, created_at "
            "FROM sessions WHERE session_token_hash = ?",
            (token_hash,),
        ).fetchone()
        if row is None:
            return None
        session_id, user_id, session_token_hash, csrf_token, expires_at, created_at = row
        return Session(
            session_id=session_id,
            user_id=user_id,
            session_token_hash=session_token_hash,
            csrf_token=csrf_token,
            expires_at=from_db_timestamp(expires_at),
            created_at=from_db_timestamp(created_at),
        )

    async def delete_by_token_hash(self, token_hash: str) -> None:
        async with self._lock:
            self._db.connection.execute("DELETE FROM sessions WHERE session_token_hash = ?", (token_hash,))
            self._db.connection.commit()

    async def delete_by_id(self, session_id: str) -> None:
        async with self._lock:
            self._db.connection.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
            self._db.connection.commit()

    async def delete_expired(self, now: datetime) -> int:
        """Remove every session with ``expires_at <= now``. Return the count removed."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "DELETE FROM sessions WHERE expires_at <= ?",
                (to_db_timestamp(now),),
            )
            self._db.connection.commit()
        return cursor.rowcount
