"""
LedgerPolicy -- the tunable rules of the rental ledger.

How a fractional day is counted and whether a negative span (an
evaluation instant before the last movement) is surfaced or clamped are
business decisions, so they are parameters rather than constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rental_kernel.domain.values import Currency


class DaySpanMode(str, Enum):
    """How the days between two instants are counted."""

    CALENDAR = "calendar"  # difference of calendar dates
    ELAPSED_TRUNCATE = "elapsed_truncate"  # whole elapsed days, toward zero
    ELAPSED_ROUND = "elapsed_round"  # elapsed days, half away from zero


class NegativeSpanPolicy(str, Enum):
    """What to do when a day-span comes out negative."""

    SURFACE = "surface"
    CLAMP = "clamp"


@dataclass(frozen=True)
class LedgerPolicy:
    """Rules applied by the interval and billing stages."""

    day_span_mode: DaySpanMode = DaySpanMode.CALENDAR
    negative_span: NegativeSpanPolicy = NegativeSpanPolicy.SURFACE
    currency: Currency = Currency("BRL")

    def __post_init__(self) -> None:
        object.__setattr__(self, "day_span_mode", DaySpanMode(self.day_span_mode))
        object.__setattr__(self, "negative_span", NegativeSpanPolicy(self.negative_span))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))


DEFAULT_POLICY = LedgerPolicy()
