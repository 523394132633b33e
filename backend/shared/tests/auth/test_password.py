"""Tests for password hashers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from argon2.exceptions import HashingError as Argon2InternalError

from shared.auth.errors import HashingError
from shared.auth.password import Argon2Hasher, BcryptHasher, PasswordHasher, SimpleHasher, get_hasher

# Low-cost parameters keep the real hashers fast in tests.
FAST_ARGON2 = {"time_cost": 1, "memory_cost": 8, "parallelism": 1}


class TestArgon2Hasher:
    async def test_hash_and_verify_roundtrip(self):
        hasher = Argon2Hasher(**FAST_ARGON2)
        hashed = await hasher.hash("my-secret-password")
        assert await hasher.verify("my-secret-password", hashed) is True

    async def test_wrong_password_rejected(self):
        hasher = Argon2Hasher(**FAST_ARGON2)
        hashed = await hasher.hash("correct-password")
        assert await hasher.verify("wrong-password", hashed) is False

    async def test_hash_is_self_describing_and_salted(self):
        hasher = Argon2Hasher(**FAST_ARGON2)
        first = await hasher.hash("same-password")
        second = await hasher.hash("same-password")

        assert first.startswith("$argon2id$")
        assert first != second

    async def test_malformed_hash_returns_false(self):
        hasher = Argon2Hasher(**FAST_ARGON2)
        assert await hasher.verify("any-password", "!") is False
        assert await hasher.verify("any-password", "simple$abc") is False

    async def test_needs_rehash_for_weaker_parameters(self):
        weak = await Argon2Hasher(**FAST_ARGON2).hash("password123")
        stronger = Argon2Hasher(time_cost=2, memory_cost=8, parallelism=1)

        assert stronger.needs_rehash(weak) is True
        assert Argon2Hasher(**FAST_ARGON2).needs_rehash(weak) is False

    async def test_internal_failure_raises_hashing_error(self):
        hasher = Argon2Hasher(**FAST_ARGON2)
        with patch.object(hasher, "_hasher") as inner:
            inner.hash.side_effect = Argon2InternalError("out of memory")
            with pytest.raises(HashingError):
                await hasher.hash("password123")

    def test_needs_rehash_ignores_foreign_hash(self):
        assert Argon2Hasher(**FAST_ARGON2).needs_rehash("not-an-argon2-hash") is False


class TestBcryptHasher:
    async def test_hash_and_verify_roundtrip(self):
        hasher = BcryptHasher(rounds=4)
        hashed = await hasher.hash("my-secret-password")
        assert await hasher.verify("my-secret-password", hashed) is True

    async def test_wrong_password_rejected(self):
        hasher = BcryptHasher(rounds=4)
        hashed = await hasher.hash("correct-password")
        assert await hasher.verify("wrong-password", hashed) is False

    async def test_malformed_hash_returns_false(self):
        """verify returns False for non-bcrypt hashes instead of raising."""
        hasher = BcryptHasher(rounds=4)
        assert await hasher.verify("any-password", "!") is False
        assert await hasher.verify("any-password", "not-a-bcrypt-hash") is False

    async def test_long_password_roundtrip(self):
        hasher = BcryptHasher(rounds=4)
        hashed = await hasher.hash("p" * 256)

        assert await hasher.verify("p" * 256, hashed) is True
        # differences past the 72nd byte still count
        assert await hasher.verify("p" * 255 + "q", hashed) is False

    async def test_multibyte_password_roundtrip(self):
        hasher = BcryptHasher(rounds=4)
        hashed = await hasher.hash("\u00e9" * 100)
        assert await hasher.verify("\u00e9" * 100, hashed) is True

    async def test_needs_rehash_when_rounds_increase(self):
        hashed = await BcryptHasher(rounds=4).hash("password123")
        assert BcryptHasher(rounds=5).needs_rehash(hashed) is True
        assert BcryptHasher(rounds=4).needs_rehash(hashed) is False


class TestSimpleHasher:
    async def test_hash_and_verify_roundtrip(self):
        hasher = SimpleHasher()
        hashed = await hasher.hash("my-secret-password")
        assert await hasher.verify("my-secret-password", hashed) is True

    async def test_wrong_password_rejected(self):
        hasher = SimpleHasher()
        hashed = await hasher.hash("correct-password")
        assert await hasher.verify("wrong-password", hashed) is False

    async def test_rejects_non_simple_hash(self):
        hasher = SimpleHasher()
        assert await hasher.verify("any-password", "not-a-simple-hash") is False


class TestGetHasher:
    def test_returns_argon2_by_default(self):
        assert isinstance(get_hasher(), Argon2Hasher)

    def test_returns_bcrypt(self):
        assert isinstance(get_hasher("bcrypt"), BcryptHasher)

    def test_returns_simple(self):
        assert isinstance(get_hasher("simple"), SimpleHasher)

    def test_hashers_satisfy_protocol(self):
        for name in ("argon2", "bcrypt", "simple"):
            assert isinstance(get_hasher(name), PasswordHasher)

    def test_rejects_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown password hasher"):
            get_hasher("md5")
