"""Clock adapters."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from slotkeeper.interfaces.clock import Clock

# pylint: disable=too-few-public-methods


class SystemClock(Clock):
    """Wall clock in a fixed IANA timezone (the provider's local time)."""

    def __init__(self, tz: str | ZoneInfo = "UTC") -> None:
        self.tz = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def __repr__(self) -> str:
        return f"SystemClock(tz={self.tz.key!r})"
