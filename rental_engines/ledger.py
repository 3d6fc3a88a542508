"""
Module: rental_engines.ledger
Responsibility:
    Ledger Builder -- sort one equipment group chronologically and fold its
    movements into a running on-site balance. Also defines the ledger
    result types shared by the later stages.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Rows are ordered by (instant, record id, delta); records without an
      id sort after those with one on the same instant. The key does not
      depend on input order, so any permutation yields the same rows.
    - balance[i] == balance[i-1] + delta[i], with balance[-1] == 0.
    - Negative balances (more picked up than delivered) are returned as-is.

Failure modes:
    - InvalidMovementDateError when a movement date is missing or
      unparseable.
    - IncomparableInstantsError when naive and aware datetimes are mixed.
    - ValidationError when a group mixes equipment ids or building sites.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from itertools import accumulate
from typing import Any

from rental_kernel.domain.dtos import Movement
from rental_kernel.domain.instants import coerce_instant, is_aware
from rental_kernel.domain.values import Currency, Money
from rental_kernel.exceptions import (
    ConfigurationError,
    IncomparableInstantsError,
    ValidationError,
)
from rental_kernel.logging_config import get_logger

logger = get_logger("engines.ledger")


@dataclass(frozen=True)
class EquipmentGroup:
    """
    All movements of one equipment item on one building site.

    Contract:
        Every movement shares ``equipment_id`` and ``building_site_id``.
    """

    equipment_id: int
    movements: tuple[Movement, ...]
    building_site_id: int | None = None
    name: str | None = None
    unit_price: Money | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "movements", tuple(self.movements))
        for m in self.movements:
            if m.equipment_id != self.equipment_id:
                raise ValidationError(
                    f"Movement for equipment {m.equipment_id} in group {self.equipment_id}",
                    record_id=m.record_id,
                    field="equipment_id",
                    value=m.equipment_id,
                )
            if m.building_site_id != self.building_site_id:
                raise ValidationError(
                    f"Movement for building site {m.building_site_id} in group "
                    f"for site {self.building_site_id}",
                    record_id=m.record_id,
                    field="building_site_id",
                    value=m.building_site_id,
                )


@dataclass(frozen=True)
class LedgerRow:
    """
    One movement after sorting, with the balance it leaves on site.

    ``day_span`` is filled in by the interval stage and ``cost`` by the
    billing stage; ``cost`` stays None when the price is unavailable.
    """

    occurred_at: datetime
    delta: int
    balance: int
    record_id: int | None = None
    day_span: int | None = None
    cost: Money | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "occurred_at": self.occurred_at.isoformat(),
            "delta": self.delta,
            "balance": self.balance,
            "day_span": self.day_span,
            "cost": str(self.cost.amount) if self.cost is not None else None,
        }


@dataclass(frozen=True)
class LedgerResult:
    """
    Ledger of one equipment item on one building site.

    Guarantees:
        - ``total`` is the sum of row costs, or None when ``cost_error``
          is set ("cost unknown" is never reported as zero).
    """

    equipment_id: int
    rows: tuple[LedgerRow, ...]
    name: str | None = None
    unit_price: Money | None = None
    total: Money | None = None
    cost_error: ConfigurationError | None = field(default=None, compare=False)

    @property
    def balance(self) -> int:
        """Quantity on site after the last movement."""
        return self.rows[-1].balance if self.rows else 0

    @property
    def cost_available(self) -> bool:
        return self.cost_error is None

    @property
    def has_negative_balance(self) -> bool:
        return any(row.balance < 0 for row in self.rows)

    def raise_for_cost(self) -> None:
        """Raise the attached ConfigurationError, if any."""
        if self.cost_error is not None:
            raise self.cost_error

    def to_dict(self) -> dict[str, Any]:
        return {
            "equipment_id": self.equipment_id,
            "name": self.name,
            "unit_price": str(self.unit_price.amount) if self.unit_price else None,
            "balance": self.balance,
            "total": str(self.total.amount) if self.total is not None else None,
            "cost_error": self.cost_error.code if self.cost_error else None,
            "rows": [row.to_dict() for row in self.rows],
        }


@dataclass(frozen=True)
class SiteLedger(Mapping[int, LedgerResult]):
    """
    Ledger of every equipment item on one building site.

    Behaves as a read-only mapping of equipment id to ``LedgerResult``,
    iterated in ascending equipment id.
    """

    evaluated_at: datetime
    currency: Currency
    groups: Mapping[int, LedgerResult] = field(default_factory=dict)
    building_site_id: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "groups", dict(sorted(self.groups.items())))

    def __getitem__(self, equipment_id: int) -> LedgerResult:
        return self.groups[equipment_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    @property
    def configuration_errors(self) -> tuple[ConfigurationError, ...]:
        return tuple(r.cost_error for r in self.groups.values() if r.cost_error is not None)

    @property
    def priced_total(self) -> Money:
        """Sum of the groups whose cost is known."""
        total = Money.zero(self.currency)
        for result in self.groups.values():
            if result.total is not None:
                total = total + result.total
        return total

    @property
    def grand_total(self) -> Money | None:
        """Total across all equipment, or None if any group cannot be priced."""
        if self.configuration_errors:
            return None
        return self.priced_total

    def to_dict(self) -> dict[str, Any]:
        grand_total = self.grand_total
        return {
            "building_site_id": self.building_site_id,
            "evaluated_at": self.evaluated_at.isoformat(),
            "currency": self.currency.code,
            "grand_total": str(grand_total.amount) if grand_total is not None else None,
            "priced_total": str(self.priced_total.amount),
            "equipment": [result.to_dict() for result in self.groups.values()],
        }


def _sort_key(item: tuple[datetime, Movement]) -> tuple:
    instant, movement = item
    has_no_id = movement.record_id is None
    return (instant, has_no_id, 0 if has_no_id else movement.record_id, movement.delta)


def ensure_comparable(instants: list[tuple[datetime, Any]], field_name: str = "occurred_at") -> None:
    """Raise IncomparableInstantsError if naive and aware datetimes are mixed."""
    if not instants:
        return
    first_aware = is_aware(instants[0][0])
    for instant, record_id in instants[1:]:
        if is_aware(instant) != first_aware:
            raise IncomparableInstantsError(record_id, field_name)


def build_ledger_rows(group: EquipmentGroup) -> tuple[LedgerRow, ...]:
    """
    Sort a group's movements and fold them into running-balance rows.

    Postconditions:
        - One row per movement, ascending by the documented sort key.
        - ``day_span`` and ``cost`` are None (filled by later stages).
    """
    dated = [
        (coerce_instant(m.occurred_at, record_id=m.record_id), m)
        for m in group.movements
    ]
    ensure_comparable([(instant, m.record_id) for instant, m in dated])
    dated.sort(key=_sort_key)

    balances = accumulate(m.delta for _, m in dated)
    rows = tuple(
        LedgerRow(
            occurred_at=instant,
            delta=m.delta,
            balance=balance,
            record_id=m.record_id,
        )
        for (instant, m), balance in zip(dated, balances)
    )

    if any(row.balance < 0 for row in rows):
        logger.warning("ledger_negative_balance", extra={
            "equipment_id": group.equipment_id,
            "building_site_id": group.building_site_id,
            "min_balance": min(row.balance for row in rows),
        })
    logger.debug("ledger_rows_built", extra={
        "equipment_id": group.equipment_id,
        "row_count": len(rows),
        "closing_balance": rows[-1].balance if rows else 0,
    })
    return rows
