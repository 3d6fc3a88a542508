"""
Clock -- Deterministic time abstraction.

Engines never read the wall clock: the evaluation instant is a parameter.
Services that need "now" receive a Clock via constructor injection, which
keeps every computation reproducible in tests and audits.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock interface. ``now()`` returns a timezone-aware datetime."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...


class SystemClock(Clock):
    """Production clock. The one sanctioned place that reads system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    ``now()`` returns the same value on repeated calls until ``advance()``
    or ``set_time()`` is called.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self._advance = timedelta(0)

    def now(self) -> datetime:
        return self._fixed_time + self._advance

    def set_time(self, time: datetime) -> None:
        self._fixed_time = time
        self._advance = timedelta(0)

    def advance(self, days: int = 0, seconds: int = 0) -> None:
        self._advance += timedelta(days=days, seconds=seconds)
