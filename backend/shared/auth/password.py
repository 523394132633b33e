"""Password hashing: protocol, Argon2id (production), bcrypt, and SHA-256 (tests).

Argon2Hasher and BcryptHasher are CPU-bound (tens to hundreds of ms per call)
and run off the event loop using anyio.to_thread.run_sync(), so concurrent
requests hash in parallel worker threads instead of queueing on the loop.

Hashes are self-describing: the algorithm, parameters, and salt travel inside
the stored string, so parameters can be raised later and old hashes keep
verifying. needs_rehash() reports hashes made with weaker parameters.

SimpleHasher uses SHA-256 with a "simple$" prefix for instant hashing.
It is intended for tests only.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Protocol, runtime_checkable

import bcrypt
from anyio import to_thread
from argon2 import PasswordHasher as _Argon2PasswordHasher
from argon2 import Type
from argon2.exceptions import HashingError as _Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from shared.auth.errors import HashingError


@runtime_checkable
class PasswordHasher(Protocol):
    """Hash and verify passwords."""

    async def hash(self, plain: str) -> str: ...

    async def verify(self, plain: str, hashed: str) -> bool: ...

    def needs_rehash(self, hashed: str) -> bool: ...


class Argon2Hasher:
    """Production hasher using Argon2id (async, off-thread)."""

    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = _Argon2PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )

    async def hash(self, plain: str) -> str:
        try:
            return await to_thread.run_sync(self._hasher.hash, plain)
        except _Argon2HashingError as exc:
            raise HashingError("argon2 hashing failed") from exc

    async def verify(self, plain: str, hashed: str) -> bool:
        """Return False for mismatches and malformed or foreign hashes."""
        try:
            return await to_thread.run_sync(self._hasher.verify, hashed, plain)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, hashed: str) -> bool:
        try:
            return self._hasher.check_needs_rehash(hashed)
        except InvalidHashError:
            return False


class BcryptHasher:
    """bcrypt hasher (async, off-thread) for accounts hashed before Argon2id.

    bcrypt only accepts 72 bytes, so passwords are reduced to a base64 SHA-256
    digest (44 bytes) first; hash and verify must apply the same step.
    """

    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds

    async def hash(self, plain: str) -> str:
        prepared = _prehash(plain)
        try:
            return await to_thread.run_sync(
                lambda: bcrypt.hashpw(prepared, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")
            )
        except ValueError as exc:
            raise HashingError("bcrypt hashing failed") from exc

    async def verify(self, plain: str, hashed: str) -> bool:
        """Return False for malformed hashes rather than propagating a ValueError."""
        prepared = _prehash(plain)
        encoded_hash = hashed.encode("utf-8")
        try:
            return await to_thread.run_sync(lambda: bcrypt.checkpw(prepared, encoded_hash))
        except ValueError:
            return False

    def needs_rehash(self, hashed: str) -> bool:
        try:
            rounds = int(hashed.split("$")[2])
        except (IndexError, ValueError):
            return False
        return rounds < self._rounds


def _prehash(plain: str) -> bytes:
    return base64.b64encode(hashlib.sha256(plain.encode("utf-8")).digest())


_SIMPLE_PREFIX = "simple$"


class SimpleHasher:
    """Fast SHA-256 hasher for tests. Not suitable for production use."""

    async def hash(self, plain: str) -> str:
        return _SIMPLE_PREFIX + hashlib.sha256(plain.encode("utf-8")).hexdigest()

    async def verify(self, plain: str, hashed: str) -> bool:
        if not hashed.startswith(_SIMPLE_PREFIX):
            return False
        expected = _SIMPLE_PREFIX + hashlib.sha256(plain.encode("utf-8")).hexdigest()
        return hmac.compare_digest(hashed, expected)

    def needs_rehash(self, hashed: str) -> bool:  # noqa: ARG002
        return False


def get_hasher(name: str = "argon2") -> PasswordHasher:
    """Return a PasswordHasher by name ("argon2", "bcrypt" or "simple")."""
    if name == "argon2":
        return Argon2Hasher()
    if name == "bcrypt":
        return BcryptHasher()
    if name == "simple":
        return SimpleHasher()
    raise ValueError(f"Unknown password hasher: {name!r}")
