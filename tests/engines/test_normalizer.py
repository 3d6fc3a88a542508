"""
Tests for the Movement Normalizer.

Covers:
- Sign comes from the direction tag only
- Persisted integer codes and word aliases
- Rejection of bad direction, quantity and equipment id
"""

from datetime import date

import pytest

from rental_engines.normalizer import normalize, normalize_all
from rental_kernel.domain.dtos import DeliveryDirection, RawDeliveryRecord
from rental_kernel.exceptions import (
    InvalidDirectionError,
    InvalidEquipmentError,
    InvalidQuantityError,
    ValidationError,
)


def _record(direction="ADD", magnitude=4, equipment_id=1, record_id=11):
    return RawDeliveryRecord(
        equipment_id=equipment_id,
        magnitude=magnitude,
        direction=direction,
        occurred_at=date(2024, 1, 1),
        building_site_id=3,
        record_id=record_id,
    )


class TestSign:
    def test_delivery_is_positive(self):
        assert normalize(_record(DeliveryDirection.ADD)).delta == 4

    def test_pickup_is_negative(self):
        assert normalize(_record(DeliveryDirection.REMOVE)).delta == -4

    def test_zero_is_passed_through(self):
        assert normalize(_record(magnitude=0)).delta == 0

    def test_other_fields_carried(self):
        movement = normalize(_record())
        assert movement.equipment_id == 1
        assert movement.building_site_id == 3
        assert movement.record_id == 11
        assert movement.occurred_at == date(2024, 1, 1)


class TestDirectionTags:
    @pytest.mark.parametrize("tag", [1, "1", "ADD", "add", "delivery", DeliveryDirection.ADD])
    def test_delivery_tags(self, tag):
        assert normalize(_record(tag)).delta == 4

    @pytest.mark.parametrize("tag", [2, "2", "REMOVE", "pickup", DeliveryDirection.REMOVE])
    def test_pickup_tags(self, tag):
        assert normalize(_record(tag)).delta == -4

    def test_legacy_code_round_trip(self):
        assert DeliveryDirection.ADD.legacy_code == 1
        assert DeliveryDirection.parse(DeliveryDirection.REMOVE.legacy_code) is DeliveryDirection.REMOVE

    @pytest.mark.parametrize("tag", [0, 3, "", "RETURN", None, True, 1.0])
    def test_unknown_tags_rejected(self, tag):
        with pytest.raises(InvalidDirectionError) as exc_info:
            normalize(_record(tag))
        assert exc_info.value.record_id == 11
        assert exc_info.value.field == "direction"


class TestRejection:
    @pytest.mark.parametrize("magnitude", [-1, 2.5, "3", True, None])
    def test_bad_quantity(self, magnitude):
        with pytest.raises(InvalidQuantityError) as exc_info:
            normalize(_record(magnitude=magnitude))
        assert exc_info.value.code == "INVALID_QUANTITY"

    @pytest.mark.parametrize("equipment_id", ["1", None, 1.0, False])
    def test_bad_equipment(self, equipment_id):
        with pytest.raises(InvalidEquipmentError):
            normalize(_record(equipment_id=equipment_id))

    def test_errors_are_validation_errors(self):
        with pytest.raises(ValidationError):
            normalize(_record(direction="sideways"))

    def test_normalize_all_stops_at_first_bad_record(self):
        records = [_record(record_id=1), _record(magnitude=-5, record_id=2), _record(record_id=3)]
        with pytest.raises(InvalidQuantityError) as exc_info:
            normalize_all(records)
        assert exc_info.value.record_id == 2

    def test_normalize_all_is_one_to_one(self):
        records = [_record(record_id=i) for i in range(5)]
        assert [m.record_id for m in normalize_all(records)] == list(range(5))
