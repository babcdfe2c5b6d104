"""
Clock -- where intake and checkout get "now" from.

``created_at`` orders the Stock Ledger and ``exited_at`` the Sold Ledger,
so services never call ``datetime.now()`` themselves: they receive a
Clock.  Production wires SystemClock; tests wire DeterministicClock and
move it explicitly.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Source of timezone-aware UTC timestamps."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    A clock that only moves when told to.

    ``now()`` keeps returning the same instant until ``advance()``.
    Naive start times are taken as UTC.
    """

    DEFAULT_START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __init__(self, start: datetime | None = None):
        start = start or self.DEFAULT_START
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._current = start

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: float | timedelta = 1) -> datetime:
        """Move forward and return the new instant."""
        step = seconds if isinstance(seconds, timedelta) else timedelta(seconds=seconds)
        if step < timedelta(0):
            raise ValueError("DeterministicClock cannot move backwards")
        self._current += step
        return self._current
