"""Auth service coordinating registration, login, logout, and password change."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from shared.auth.errors import AuthenticationError, ConflictError, ValidationError
from shared.auth.models import AuthResult, User

if TYPE_CHECKING:
    from shared.auth.password import PasswordHasher
    from shared.auth.session_store import AuthSessionStore
    from shared.auth.verifier import SessionVerifier
    from shared.dal.user_repository import UserRepository

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 64

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 256

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_SESSION = "Invalid session"

logger = structlog.get_logger()


class AuthService:
    """Coordinate user registration, login, logout, and password change.

    All collaborators are injected; there is no module-level store.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        session_store: AuthSessionStore,
        verifier: SessionVerifier,
        *,
        password_hasher: PasswordHasher,
    ) -> None:
        self._user_repo = user_repo
        self._session_store = session_store
        self._verifier = verifier
        self._hasher = password_hasher
        self._dummy_hash: str | None = None

    async def register(self, username: str, password: str) -> AuthResult:
        """Create an account and sign it in.

        User and session creation are not atomic: if session creation fails,
        the account exists and the caller can log in.
        """
        _validate_username(username)
        _validate_password(password, field="password")
        if await self._user_repo.get_by_username(username) is not None:
            raise ConflictError("Username already taken")

        user = User(
            user_id=str(uuid4()),
            username=username,
            password_hash=await self._hasher.hash(password),
            created_at=self._session_store.clock.now(),
        )
        try:
            await self._user_repo.create_user(user)
        except ValueError as e:
            # lost a race with a concurrent registration of the same name
            raise ConflictError("Username already taken") from e
        logger.info("user registered", user_id=user.user_id, username=username)

        return await self._issue(user)

    async def login(self, username: str, password: str) -> AuthResult:
        """Validate credentials and create a session.

        Input outside the registration limits is a ValidationError and never
        reaches the hasher. Unknown users and wrong passwords raise the same
        AuthenticationError, and both pay for one hash verification.
        """
        _validate_username(username)
        _validate_password(password, field="password")
        user = await self._user_repo.get_by_username(username)
        if user is None:
            await self._hasher.verify(password, await self._get_dummy_hash())
            logger.info("login failed", username=username)
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not await self._hasher.verify(password, user.password_hash):
            logger.info("login failed", username=username)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if self._hasher.needs_rehash(user.password_hash):
            await self._user_repo.update_password_hash(user.user_id, await self._hasher.hash(password))
            logger.info("password rehashed", user_id=user.user_id)

        return await self._issue(user)

    async def logout(self, raw_token: str | None) -> None:
        """Revoke the session for ``raw_token`` if any. Always succeeds."""
        if raw_token:
            await self._session_store.delete_by_token_digest(self._session_store.tokens.digest(raw_token))

    async def change_password(
        self,
        raw_token: str | None,
        csrf_header: str | None,
        current_password: str,
        new_password: str,
    ) -> None:
        """Replace the caller's password. Other live sessions are left untouched."""
        result = await self._verifier.verify(raw_token, csrf_header)
        if not result.ok or result.user_id is None:
            raise AuthenticationError(INVALID_SESSION)

        _validate_password(current_password, field="currentPassword")
        _validate_password(new_password, field="newPassword")

        user = await self._user_repo.get_by_id(result.user_id)
        if user is None:
            raise AuthenticationError(INVALID_SESSION)
        if not await self._hasher.verify(current_password, user.password_hash):
            logger.info("password change rejected", user_id=user.user_id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        await self._user_repo.update_password_hash(user.user_id, await self._hasher.hash(new_password))
        logger.info("password changed", user_id=user.user_id)

    async def get_user(self, user_id: str) -> User | None:
        return await self._user_repo.get_by_id(user_id)

    async def prime_dummy_hash(self) -> None:
        """Hash the decoy used for unknown-user logins. Call once at startup."""
        self._dummy_hash = await self._hasher.hash(secrets.token_hex(16))

    # -- private helpers --

    async def _issue(self, user: User) -> AuthResult:
        session = await self._session_store.create(user.user_id)
        return AuthResult(user_id=user.user_id, username=user.username, session=session)

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            await self.prime_dummy_hash()
        return self._dummy_hash  # type: ignore[return-value]


def _validate_username(username: str) -> None:
    """Validate username: 3-64 chars."""
    if len(username) < USERNAME_MIN_LENGTH or len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            "username",
            f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters",
        )


def _validate_password(password: str, *, field: str) -> None:
    """Validate password: 8-256 chars."""
    if len(password) < PASSWORD_MIN_LENGTH or len(password) > PASSWORD_MAX_LENGTH:
        raise ValidationError(
            field,
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters",
        )
