"""Auth settings: cookie, session lifetime, storage, and hasher selection."""

from datetime import timedelta
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_", "populate_by_name": True}

    session_cookie_name: str = Field(default="session_token", min_length=1)

    session_ttl_days: int = Field(default=30, gt=0)

    # Production mode sets the Secure flag on both auth cookies
    production: bool = False

    # SQLite database file path
    database_path: str = "backend/storage.db"

    password_hasher: Literal["argon2", "bcrypt", "simple"] = "argon2"

    # Interval of the background expired-session sweep; 0 disables it
    session_cleanup_interval_seconds: float = Field(default=300, ge=0)

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.session_ttl_days)

    @property
    def cookie_secure(self) -> bool:
        return self.production
