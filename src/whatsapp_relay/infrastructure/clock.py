from __future__ import annotations

from datetime import datetime, timezone


class SystemClock:
    """Implements application.ports.clock.Clock with UTC wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
