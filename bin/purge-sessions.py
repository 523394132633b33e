"""Delete expired sessions from the auth database and print how many were removed.

Usage: python bin/purge-sessions.py

Reads AUTH_DATABASE_PATH like the server does. Safe to run while the server
is up; it is the one-shot counterpart of the in-process cleanup task.
"""

import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from shared.auth.session_store import AuthSessionStore
from shared.auth.settings import AuthSettings
from shared.db import Database, SqliteSessionRepository
from shared.logging import setup_logging


async def main() -> None:
    setup_logging()
    auth_settings = AuthSettings()

    db = Database(auth_settings.database_path)
    db.connect()

    try:
        store = AuthSessionStore(SqliteSessionRepository(db), ttl=auth_settings.session_ttl)
        removed = await store.cleanup_expired()
        print(f"Removed {removed} expired session(s) from {auth_settings.database_path}")
    finally:
        db.close()


if __name__ == "__main__":
    asyncio.run(main())
