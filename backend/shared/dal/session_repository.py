"""Abstract interface for session persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from shared.auth.models import Session


class SessionRepository(ABC):
    """Abstract interface for session persistence.

    Rows are keyed for lookup by ``session_token_hash``, which must be unique.
    Deletes are idempotent.
    """

    @abstractmethod
    async def create_session(self, session: Session) -> None: ...

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Session | None: ...

    @abstractmethod
    async def delete_by_token_hash(self, token_hash: str) -> None: ...

    @abstractmethod
    async def delete_by_id(self, session_id: str) -> None: ...

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int: ...
