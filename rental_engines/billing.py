"""
Module: rental_engines.billing
Responsibility:
    Billing Aggregator -- price each ledger row as
    ``unit_price * balance * day_span`` and total the group.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic through Money; no rounding is applied, so
      row costs sum exactly to the group total.
    - When the price is unusable the rows keep balance and span, cost and
      total stay None, and the ConfigurationError travels with them.

Failure modes:
    - MissingUnitPriceError, InvalidUnitPriceError, UnitPriceCurrencyError
      are returned, not raised.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from rental_kernel.domain.dtos import RentableItem
from rental_kernel.domain.values import Currency, Money
from rental_kernel.exceptions import (
    ConfigurationError,
    InvalidUnitPriceError,
    MissingUnitPriceError,
    UnitPriceCurrencyError,
)
from rental_kernel.logging_config import get_logger
from rental_engines.ledger import LedgerRow

logger = get_logger("engines.billing")


@dataclass(frozen=True)
class PricedRows:
    """Output of the billing stage for one equipment group."""

    rows: tuple[LedgerRow, ...]
    total: Money | None
    error: ConfigurationError | None = None


def resolve_unit_price(
    entry: Any,
    equipment_id: int,
    currency: Currency,
    movement_count: int,
) -> Money:
    """
    Turn a catalogue entry into a unit price in the ledger currency.

    ``entry`` is a RentableItem, a bare price (Money, Decimal, str, int)
    or None.

    Raises:
        MissingUnitPriceError: no entry, or an entry without a price.
        InvalidUnitPriceError: price is not a non-negative decimal.
        UnitPriceCurrencyError: Money price in another currency.
    """
    price = entry.unit_price if isinstance(entry, RentableItem) else entry
    if price is None:
        raise MissingUnitPriceError(equipment_id, movement_count)

    if isinstance(price, Money):
        if price.currency != currency:
            raise UnitPriceCurrencyError(equipment_id, price.currency.code, currency.code)
        money = price
    elif isinstance(price, (Decimal, str, int)) and not isinstance(price, bool):
        try:
            money = Money.of(price, currency)
        except (InvalidOperation, ValueError) as e:
            raise InvalidUnitPriceError(equipment_id, price) from e
    else:
        raise InvalidUnitPriceError(equipment_id, price)

    if money.is_negative:
        raise InvalidUnitPriceError(equipment_id, price)
    return money


def price_rows(
    rows: Sequence[LedgerRow],
    unit_price: Money | None,
    error: ConfigurationError | None = None,
) -> PricedRows:
    """
    Fill in row costs and the group total.

    Pass ``error`` instead of a price when the price could not be resolved;
    rows are then returned unpriced with the error attached.
    """
    if unit_price is None:
        if error is None:
            raise ValueError("price_rows needs a unit_price or an error")
        return PricedRows(rows=tuple(rows), total=None, error=error)

    priced = tuple(
        dataclasses.replace(row, cost=unit_price * (row.balance * row.day_span))
        for row in rows
    )
    total = Money.zero(unit_price.currency)
    for row in priced:
        total = total + row.cost
    return PricedRows(rows=priced, total=total)
