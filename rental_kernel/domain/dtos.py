"""
DTOs -- records crossing the boundary between persistence and the ledger.

The persistence collaborator hands over ``RawDeliveryRecord`` and
``RentableItem`` values; the engines turn them into ``Movement`` values.
All are frozen: nothing in the ledger mutates its input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from rental_kernel.domain.values import Money
from rental_kernel.exceptions import InvalidDirectionError

# Instants accepted from persistence before coercion.
RawInstant = datetime | date | str | None


class DeliveryDirection(str, Enum):
    """Direction of a delivery record: equipment added to or removed from a site."""

    ADD = "ADD"  # Entrega
    REMOVE = "REMOVE"  # Retirada

    @classmethod
    def parse(cls, value: Any, record_id: Any = None) -> DeliveryDirection:
        """
        Resolve a direction tag.

        Accepts the enum itself, its name, the persisted integer codes
        (1 = delivery, 2 = pickup) and the words ``delivery``/``pickup``.

        Raises:
            InvalidDirectionError: for any other value.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidDirectionError(value, record_id)
        if isinstance(value, int):
            found = _LEGACY_CODES.get(value)
        elif isinstance(value, str):
            key = value.strip().upper()
            found = _ALIASES.get(key)
            if found is None and key.isdigit():
                found = _LEGACY_CODES.get(int(key))
        else:
            found = None
        if found is None:
            raise InvalidDirectionError(value, record_id)
        return found

    @property
    def legacy_code(self) -> int:
        return 1 if self is DeliveryDirection.ADD else 2


_LEGACY_CODES: dict[int, DeliveryDirection] = {
    1: DeliveryDirection.ADD,
    2: DeliveryDirection.REMOVE,
}

_ALIASES: dict[str, DeliveryDirection] = {
    "ADD": DeliveryDirection.ADD,
    "DELIVERY": DeliveryDirection.ADD,
    "REMOVE": DeliveryDirection.REMOVE,
    "PICKUP": DeliveryDirection.REMOVE,
}


@dataclass(frozen=True)
class RawDeliveryRecord:
    """
    A persisted delivery or pickup, as the persistence layer returns it.

    ``magnitude`` is unsigned; the sign comes from ``direction`` alone.
    ``record_id`` is None for records that have not been saved yet.
    """

    equipment_id: int
    magnitude: int
    direction: DeliveryDirection | str | int
    occurred_at: RawInstant
    building_site_id: int | None = None
    record_id: int | None = None


@dataclass(frozen=True)
class Movement:
    """A signed change of on-site quantity for one equipment item."""

    equipment_id: int
    delta: int
    occurred_at: RawInstant
    building_site_id: int | None = None
    record_id: int | None = None


@dataclass(frozen=True)
class RentableItem:
    """
    Catalogue entry for a rentable equipment item.

    ``unit_price`` is the price per unit per day; None means no price has
    been configured.
    """

    equipment_id: int
    name: str
    unit_price: Money | None = None


@dataclass(frozen=True)
class BuildingSiteSnapshot:
    """
    Everything the ledger needs about one building site, read in one go.

    ``catalogue`` maps equipment id to its catalogue entry.
    """

    site_id: int
    name: str
    deliveries: tuple[RawDeliveryRecord, ...]
    catalogue: Mapping[int, RentableItem]
    client_name: str | None = None
    address: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "deliveries", tuple(self.deliveries))
