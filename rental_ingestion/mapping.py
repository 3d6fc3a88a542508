"""
Row mapping: persistence-layer rows -> ledger DTOs.

The persistence layer returns dicts in its own casing (``rentableId``,
``deliveryType`` ...) with the integer delivery codes 1 (delivery) and 2
(pickup). These functions map them onto ``RawDeliveryRecord`` and
``RentableItem`` without interpreting them further: sign, ordering and
date parsing stay with the engines.

Failure modes:
    - InvalidQuantityError / InvalidEquipmentError for counts or ids that
      are not integers.
    - InvalidDirectionError for unknown delivery types.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from rental_kernel.domain.dtos import DeliveryDirection, RawDeliveryRecord, RentableItem
from rental_kernel.domain.values import Currency, Money
from rental_kernel.exceptions import (
    InvalidEquipmentError,
    InvalidQuantityError,
    ValidationError,
)
from rental_kernel.logging_config import get_logger

logger = get_logger("ingestion.mapping")

_RECORD_ID_KEYS = ("id", "record_id", "recordId")
_EQUIPMENT_KEYS = ("rentableId", "rentable_id", "equipment_id", "equipmentId")
_COUNT_KEYS = ("count", "quantity", "magnitude")
_DIRECTION_KEYS = ("deliveryType", "delivery_type", "direction")
_DATE_KEYS = ("date", "occurred_at", "occurredAt", "createdAt", "created_at")
_SITE_KEYS = ("buildingSiteId", "building_site_id")
_PRICE_KEYS = ("price", "unitPrice", "unit_price")


def _pick(row: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    """First non-None value among ``keys``."""
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def record_from_row(row: Mapping[str, Any]) -> RawDeliveryRecord:
    """Map one persisted delivery row onto a ``RawDeliveryRecord``."""
    raw_id = _pick(row, _RECORD_ID_KEYS)
    record_id = _as_int(raw_id)
    if raw_id is not None and record_id is None:
        raise ValidationError(f"Record id must be an integer, got {raw_id!r}", field="record_id", value=raw_id)

    raw_equipment = _pick(row, _EQUIPMENT_KEYS)
    equipment_id = _as_int(raw_equipment)
    if equipment_id is None:
        raise InvalidEquipmentError(raw_equipment, record_id)

    raw_count = _pick(row, _COUNT_KEYS)
    magnitude = _as_int(raw_count)
    if magnitude is None:
        raise InvalidQuantityError(raw_count, record_id)

    raw_site = _pick(row, _SITE_KEYS)
    building_site_id = _as_int(raw_site)
    if raw_site is not None and building_site_id is None:
        raise ValidationError(
            f"Building site id must be an integer, got {raw_site!r}",
            record_id=record_id,
            field="building_site_id",
            value=raw_site,
        )

    return RawDeliveryRecord(
        equipment_id=equipment_id,
        magnitude=magnitude,
        direction=DeliveryDirection.parse(_pick(row, _DIRECTION_KEYS), record_id),
        occurred_at=_pick(row, _DATE_KEYS),
        building_site_id=building_site_id,
        record_id=record_id,
    )


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[RawDeliveryRecord, ...]:
    return tuple(record_from_row(row) for row in rows)


def _parse_price(value: Any, currency: Currency) -> Money | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Money):
        return value
    try:
        # YAML hands back floats; go through str so no binary noise leaks in
        return Money.of(Decimal(str(value)), currency)
    except (InvalidOperation, ValueError):
        return None


def catalogue_from_rows(
    rows: Iterable[Mapping[str, Any]],
    currency: Currency | str = "BRL",
) -> dict[int, RentableItem]:
    """
    Map rentable rows (``id``, ``name``, ``price``) onto catalogue entries.

    A price that cannot be read is logged and left unset, so the ledger
    reports that equipment's cost as unavailable.
    """
    currency = Currency(currency) if isinstance(currency, str) else currency
    catalogue: dict[int, RentableItem] = {}
    for row in rows:
        raw_id = _pick(row, ("id", *_EQUIPMENT_KEYS))
        equipment_id = _as_int(raw_id)
        if equipment_id is None:
            raise InvalidEquipmentError(raw_id)
        raw_price = _pick(row, _PRICE_KEYS)
        price = _parse_price(raw_price, currency)
        if raw_price is not None and price is None:
            logger.warning("rentable_price_unreadable", extra={
                "equipment_id": equipment_id,
                "raw_price": str(raw_price),
            })
        catalogue[equipment_id] = RentableItem(
            equipment_id=equipment_id,
            name=str(row.get("name") or f"#{equipment_id}"),
            unit_price=price,
        )
    return catalogue


def records_from_delivery_batch(
    entries: Iterable[Mapping[str, Any]],
    building_site_id: int,
    occurred_at: Any,
) -> tuple[RawDeliveryRecord, ...]:
    """
    Turn one multi-rentable delivery submission into records.

    Each entry carries ``rentableId``, ``count`` and ``deliveryType``.
    Entries with a zero count are dropped: they carry no ledger meaning.
    The returned records are unsaved and have no record id.
    """
    records: list[RawDeliveryRecord] = []
    for entry in entries:
        record = record_from_row({
            **entry,
            "id": None,
            "buildingSiteId": building_site_id,
            "date": occurred_at,
        })
        if record.magnitude != 0:
            records.append(record)
    return tuple(records)
