"""
Typed Exception Hierarchy for the Rental Kernel.

Every error has a typed class, a machine-readable ``code`` class attribute,
and structured attributes so callers catch by type and render by data,
never by parsing messages.

    RentalKernelError (base)
    |
    +-- ValidationError                 not recoverable: reject the whole site
    |   +-- InvalidDirectionError
    |   +-- InvalidQuantityError
    |   +-- InvalidEquipmentError
    |   +-- InvalidMovementDateError
    |   +-- MixedBuildingSitesError
    |   +-- IncomparableInstantsError
    |
    +-- ConfigurationError              recoverable: cost marked unavailable
        +-- MissingUnitPriceError
        +-- InvalidUnitPriceError
        +-- UnitPriceCurrencyError

Category        | Code                          | When Raised
----------------|-------------------------------|----------------------------------
Validation      | INVALID_DIRECTION             | Unknown delivery/pickup tag
                | INVALID_QUANTITY              | Negative or non-integer magnitude
                | INVALID_EQUIPMENT             | Equipment id is not an integer
                | INVALID_MOVEMENT_DATE         | Date missing or unparseable
                | MIXED_BUILDING_SITES          | Movements from >1 site in one call
                | INCOMPARABLE_INSTANTS         | Naive and aware datetimes mixed
----------------|-------------------------------|----------------------------------
Configuration   | MISSING_UNIT_PRICE            | Equipment moved but has no price
                | INVALID_UNIT_PRICE            | Price not a non-negative decimal
                | UNIT_PRICE_CURRENCY_MISMATCH  | Price currency != ledger currency

Handling pattern::

    try:
        ledger = compute_ledger(movements=records, catalogue=catalogue, now=now)
    except ValidationError as e:
        show_error(code=e.code, record=e.record_id)   # no partial balances
    else:
        for result in ledger.values():
            if not result.cost_available:
                show_inline(result.cost_error.code)    # "price unavailable"
"""

from __future__ import annotations

from typing import Any


class RentalKernelError(Exception):
    """
    Base exception for all rental kernel errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "RENTAL_KERNEL_ERROR"


# Validation exceptions


class ValidationError(RentalKernelError):
    """A delivery record cannot be turned into a ledger movement."""

    code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        reason: str,
        *,
        record_id: Any = None,
        field: str | None = None,
        value: Any = None,
    ):
        self.reason = reason
        self.record_id = record_id
        self.field = field
        self.value = value
        where = f" (record {record_id})" if record_id is not None else ""
        super().__init__(f"{reason}{where}")


class InvalidDirectionError(ValidationError):
    """Delivery type tag is neither a delivery nor a pickup."""

    code: str = "INVALID_DIRECTION"

    def __init__(self, direction: Any, record_id: Any = None):
        self.direction = direction
        super().__init__(
            f"Unrecognized delivery direction: {direction!r}",
            record_id=record_id,
            field="direction",
            value=direction,
        )


class InvalidQuantityError(ValidationError):
    """Magnitude is negative or not an integer."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, magnitude: Any, record_id: Any = None):
        self.magnitude = magnitude
        super().__init__(
            f"Quantity must be a non-negative integer, got {magnitude!r}",
            record_id=record_id,
            field="magnitude",
            value=magnitude,
        )


class InvalidEquipmentError(ValidationError):
    """Equipment identifier is not an integer."""

    code: str = "INVALID_EQUIPMENT"

    def __init__(self, equipment_id: Any, record_id: Any = None):
        self.equipment_id = equipment_id
        super().__init__(
            f"Equipment id must be an integer, got {equipment_id!r}",
            record_id=record_id,
            field="equipment_id",
            value=equipment_id,
        )


class InvalidMovementDateError(ValidationError):
    """Movement date is absent or cannot be parsed."""

    code: str = "INVALID_MOVEMENT_DATE"

    def __init__(self, value: Any, record_id: Any = None, field: str = "occurred_at"):
        reason = (
            f"Missing {field}" if value is None
            else f"Unparseable {field}: {value!r}"
        )
        super().__init__(reason, record_id=record_id, field=field, value=value)


class MixedBuildingSitesError(ValidationError):
    """Movements from more than one building site were passed together."""

    code: str = "MIXED_BUILDING_SITES"

    def __init__(self, building_site_ids: tuple[Any, ...]):
        self.building_site_ids = building_site_ids
        super().__init__(
            "Ledger must be computed for one building site at a time, got "
            f"{', '.join(repr(s) for s in building_site_ids)}",
            field="building_site_id",
        )


class IncomparableInstantsError(ValidationError):
    """Timezone-aware and naive datetimes cannot be ordered together."""

    code: str = "INCOMPARABLE_INSTANTS"

    def __init__(self, record_id: Any = None, field: str = "occurred_at"):
        super().__init__(
            "Cannot mix timezone-aware and naive datetimes",
            record_id=record_id,
            field=field,
        )


# Configuration exceptions


class ConfigurationError(RentalKernelError):
    """
    Catalogue data prevents pricing an equipment group.

    Recoverable: balances and day-spans are still produced; only cost
    fields are marked unavailable.
    """

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, equipment_id: int, reason: str):
        self.equipment_id = equipment_id
        self.reason = reason
        super().__init__(f"Equipment {equipment_id}: {reason}")


class MissingUnitPriceError(ConfigurationError):
    """Equipment has movements but no catalogue price."""

    code: str = "MISSING_UNIT_PRICE"

    def __init__(self, equipment_id: int, movement_count: int):
        self.movement_count = movement_count
        super().__init__(
            equipment_id,
            f"no unit price in catalogue for {movement_count} movement(s)",
        )


class InvalidUnitPriceError(ConfigurationError):
    """Catalogue price is not a non-negative decimal amount."""

    code: str = "INVALID_UNIT_PRICE"

    def __init__(self, equipment_id: int, unit_price: Any):
        self.unit_price = unit_price
        super().__init__(equipment_id, f"invalid unit price {unit_price!r}")


class UnitPriceCurrencyError(ConfigurationError):
    """Catalogue price is in a different currency than the ledger."""

    code: str = "UNIT_PRICE_CURRENCY_MISMATCH"

    def __init__(self, equipment_id: int, price_currency: str, ledger_currency: str):
        self.price_currency = price_currency
        self.ledger_currency = ledger_currency
        super().__init__(
            equipment_id,
            f"unit price in {price_currency}, ledger in {ledger_currency}",
        )
