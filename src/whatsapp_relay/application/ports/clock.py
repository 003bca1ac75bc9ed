from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of timezone-aware timestamps reported by the health endpoint."""

    def now(self) -> datetime: ...
