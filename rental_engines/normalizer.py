"""
Movement Normalizer.

Maps each raw delivery record 1:1 onto a signed ``Movement``: deliveries
add their magnitude to the site, pickups subtract it. The sign comes only
from the direction tag. Zero-quantity movements are passed through; the
caller drops them.
"""

from __future__ import annotations

from collections.abc import Iterable

from rental_kernel.domain.dtos import DeliveryDirection, Movement, RawDeliveryRecord
from rental_kernel.exceptions import InvalidEquipmentError, InvalidQuantityError


def normalize(record: RawDeliveryRecord) -> Movement:
    """
    Convert one raw delivery record into a signed movement.

    Raises:
        InvalidDirectionError: unknown direction tag.
        InvalidQuantityError: magnitude negative or not an integer.
        InvalidEquipmentError: equipment id not an integer.
    """
    direction = DeliveryDirection.parse(record.direction, record.record_id)

    magnitude = record.magnitude
    if isinstance(magnitude, bool) or not isinstance(magnitude, int) or magnitude < 0:
        raise InvalidQuantityError(magnitude, record.record_id)

    equipment_id = record.equipment_id
    if isinstance(equipment_id, bool) or not isinstance(equipment_id, int):
        raise InvalidEquipmentError(equipment_id, record.record_id)

    delta = magnitude if direction is DeliveryDirection.ADD else -magnitude
    return Movement(
        equipment_id=equipment_id,
        delta=delta,
        occurred_at=record.occurred_at,
        building_site_id=record.building_site_id,
        record_id=record.record_id,
    )


def normalize_all(records: Iterable[RawDeliveryRecord]) -> tuple[Movement, ...]:
    """Normalize every record, failing on the first invalid one."""
    return tuple(normalize(r) for r in records)
