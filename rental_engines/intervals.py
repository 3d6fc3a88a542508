"""
Module: rental_engines.intervals
Responsibility:
    Interval Calculator -- for each ledger row, the number of days its
    balance was held: until the next row, or until the evaluation instant
    for the last row.

Architecture position:
    Engines -- pure calculation layer, zero I/O. ``now`` is always a
    parameter; this module never reads the clock.

Invariants enforced:
    - span[i] == days_between(date[i], date[i+1]) for i < n-1.
    - span[n-1] == days_between(date[n-1], now).
    - Same-day rows get a span of 0. Negative spans are surfaced unless
      the policy clamps them.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from rental_kernel.domain.instants import is_aware
from rental_kernel.domain.policy import (
    DEFAULT_POLICY,
    DaySpanMode,
    LedgerPolicy,
    NegativeSpanPolicy,
)
from rental_kernel.exceptions import IncomparableInstantsError
from rental_kernel.logging_config import get_logger
from rental_engines.ledger import LedgerRow

logger = get_logger("engines.intervals")

_ONE_DAY = timedelta(days=1)
_MICROSECONDS_PER_DAY = _ONE_DAY // timedelta(microseconds=1)


def calendar_date(instant: datetime) -> date:
    """Calendar date of ``instant``; aware instants are read in UTC."""
    if is_aware(instant):
        return instant.astimezone(timezone.utc).date()
    return instant.date()


def days_between(
    start: datetime,
    end: datetime,
    mode: DaySpanMode = DaySpanMode.CALENDAR,
) -> int:
    """
    Whole days from ``start`` to ``end`` (negative if ``end`` is earlier).

    Calendar mode compares UTC dates for aware instants, so rows stored
    with different offsets count days on one calendar. Naive instants
    keep their wall-clock date.

    Raises:
        IncomparableInstantsError: elapsed modes with one naive and one
            aware instant.
    """
    if mode is DaySpanMode.CALENDAR:
        return (calendar_date(end) - calendar_date(start)).days

    if is_aware(start) != is_aware(end):
        raise IncomparableInstantsError(field="now")
    elapsed_us = (end - start) // timedelta(microseconds=1)

    if mode is DaySpanMode.ELAPSED_TRUNCATE:
        whole = abs(elapsed_us) // _MICROSECONDS_PER_DAY
        return whole if elapsed_us >= 0 else -whole

    # ROUND_HALF_UP on Decimal rounds half away from zero
    days = Decimal(elapsed_us) / Decimal(_MICROSECONDS_PER_DAY)
    return int(days.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def assign_day_spans(
    rows: Sequence[LedgerRow],
    now: datetime,
    policy: LedgerPolicy = DEFAULT_POLICY,
) -> tuple[LedgerRow, ...]:
    """
    Return copies of ``rows`` with ``day_span`` filled in.

    Preconditions:
        ``rows`` are sorted ascending (as produced by build_ledger_rows).
    """
    ends = [row.occurred_at for row in rows[1:]] + [now]
    spanned: list[LedgerRow] = []
    for row, end in zip(rows, ends):
        span = days_between(row.occurred_at, end, policy.day_span_mode)
        if span < 0:
            logger.warning("negative_day_span", extra={
                "record_id": row.record_id,
                "occurred_at": row.occurred_at,
                "until": end,
                "day_span": span,
                "policy": policy.negative_span.value,
            })
            if policy.negative_span is NegativeSpanPolicy.CLAMP:
                span = 0
        spanned.append(dataclasses.replace(row, day_span=span))
    return tuple(spanned)
