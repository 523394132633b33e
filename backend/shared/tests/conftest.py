"""Fixtures wiring the auth core to a temporary SQLite database."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shared.auth.password import SimpleHasher
from shared.auth.service import AuthService
from shared.auth.session_store import AuthSessionStore
from shared.auth.verifier import SessionVerifier
from shared.db import Database, SqliteSessionRepository, SqliteUserRepository
from shared.db.connection import to_db_timestamp

if TYPE_CHECKING:
    from pathlib import Path

SESSION_OWNER_ID = "user-1"


@pytest.fixture
def db(tmp_path: Path):
    database = Database(tmp_path / "test.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def user_repo(db):
    return SqliteUserRepository(db)


@pytest.fixture
def session_repo(db, clock):
    # sessions reference users, so seed the owner the store tests issue sessions for
    db.connection.execute(
        "INSERT INTO users (id, username, password_hash, created_at) VALUES (?, ?, ?, ?)",
        (SESSION_OWNER_ID, "session-owner", "simple$x", to_db_timestamp(clock.now())),
    )
    db.connection.commit()
    return SqliteSessionRepository(db)


@pytest.fixture
def session_store(session_repo, clock):
    return AuthSessionStore(session_repo, clock=clock, cleanup_interval_seconds=0)


@pytest.fixture
def verifier(session_store):
    return SessionVerifier(session_store)


@pytest.fixture
def auth_service(user_repo, session_store, verifier):
    return AuthService(user_repo, session_store, verifier, password_hasher=SimpleHasher())
