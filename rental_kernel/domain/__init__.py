"""
Rental kernel domain: value objects, DTOs, clock and ledger policy.

Pure functional core, zero I/O (except SystemClock).
"""

from rental_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from rental_kernel.domain.dtos import (
    BuildingSiteSnapshot,
    DeliveryDirection,
    Movement,
    RawDeliveryRecord,
    RentableItem,
)
from rental_kernel.domain.instants import coerce_instant
from rental_kernel.domain.policy import (
    DEFAULT_POLICY,
    DaySpanMode,
    LedgerPolicy,
    NegativeSpanPolicy,
)
from rental_kernel.domain.values import Currency, Money

__all__ = [
    "BuildingSiteSnapshot",
    "Clock",
    "Currency",
    "DEFAULT_POLICY",
    "DaySpanMode",
    "DeliveryDirection",
    "DeterministicClock",
    "LedgerPolicy",
    "Money",
    "Movement",
    "NegativeSpanPolicy",
    "RawDeliveryRecord",
    "RentableItem",
    "SystemClock",
    "coerce_instant",
]
