from __future__ import annotations

from datetime import datetime, timezone


class Clock:
    """Source of "now" for expiry math. Swap it out in tests."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


system_clock = Clock()
