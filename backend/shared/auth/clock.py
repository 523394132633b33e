"""Injectable wall clock used for session expiry decisions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Timezone-aware UTC clock."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)
