"""SQLite-backed user repository."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING

from shared.auth.models import User
from shared.dal.user_repository import UserRepository
from shared.db.connection import from_db_timestamp, to_db_timestamp

if TYPE_CHECKING:
    from shared.db.connection import Database

_SELECT_USER = "SELECT id, username, password_hash, created_at FROM users"


class SqliteUserRepository(UserRepository):
    """SQLite implementation of UserRepository.

    Uses a single INSERT under an asyncio lock to avoid race windows
    between existence checks and inserts. Relies on the unique username
    index and maps IntegrityError to domain ValueError.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_user(self, user: User) -> None:
        """Insert a user. Raises ValueError on duplicate id or username."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO users (id, username, password_hash, created_at) VALUES (?, ?, ?, ?)",
                    (
                        user.user_id,
                        user.username,
                        user.password_hash,
                        to_db_timestamp(user.created_at),
                    ),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                error_msg = str(exc).lower()
                if "users.username" in error_msg or "idx_users_username" in error_msg:
                    raise ValueError(f"Username '{user.username}' already taken") from exc
                if "users.id" in error_msg:
                    raise ValueError(f"User with id '{user.user_id}' already exists") from exc
                raise ValueError(str(exc)) from exc  # pragma: no cover

    async def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact (case-sensitive) username."""
        row = self._db.connection.execute(f"{_SELECT_USER} WHERE username = ?", (username,)).fetchone()
        if row is None:
            return None
        return _row_to_user(row)

    async def get_by_id(self, user_id: str) -> User | None:
        row = self._db.connection.execute(f"{_SELECT_USER} WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        return _row_to_user(row)

    async def update_password_hash(self, user_id: str, password_hash: str) -> None:
        """Replace a user's password hash. Raises ValueError if the user does not exist."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "UPDATE users SET password_hash = ? WHERE id = ?",
                (password_hash, user_id),
            )
            self._db.connection.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"User with id '{user_id}' not found")


def _row_to_user(row: tuple[str, str, str, str]) -> User:
    user_id, username, password_hash, created_at = row
    return User(
        user_id=user_id,
        username=username,
        password_hash=password_hash,
        created_at=from_db_timestamp(created_at),
    )
