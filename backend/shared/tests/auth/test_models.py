"""Tests for auth models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from shared.auth.models import IssuedSession, RejectReason, Session, SessionResult, User

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _session(expires_at: datetime) -> Session:
    return Session(
        session_id="s1",
        user_id="u1",
        session_token_hash="a" * 64,
        csrf_token="c" * 32,
        expires_at=expires_at,
        created_at=NOW,
    )


class TestUser:
    def test_password_hash_hidden_from_repr(self):
        user = User(user_id="u1", username="alice", password_hash="simple$secret", created_at=NOW)
        assert "simple$secret" not in repr(user)

    def test_is_frozen(self):
        user = User(user_id="u1", username="alice", password_hash="h", created_at=NOW)
        with pytest.raises(ValidationError):
            user.username = "bob"


class TestSession:
    def test_not_expired_before_deadline(self):
        assert not _session(NOW + timedelta(seconds=1)).is_expired(NOW)

    def test_expired_at_deadline(self):
        assert _session(NOW).is_expired(NOW)


class TestIssuedSession:
    def test_raw_values_hidden_from_repr(self):
        issued = IssuedSession(raw_token="tok-secret", raw_csrf="csrf-secret", expires_at=NOW)
        assert "tok-secret" not in repr(issued)
        assert "csrf-secret" not in repr(issued)


class TestSessionResult:
    def test_accepted(self):
        result = SessionResult.accepted("u1", "csrf")
        assert result.ok
        assert result.reason is None

    def test_rejected_carries_no_identity(self):
        result = SessionResult.rejected(RejectReason.EXPIRED)
        assert not result.ok
        assert result.user_id is None
        assert result.csrf_token is None
