"""
Tests for SiteLedgerService.

Covers:
- Evaluation instant from the injected clock or an explicit as-of date
- On-site counts and the newest-first delivery timeline
- Whole-site rejection rendered as an error view
"""

from datetime import date, datetime, timezone

import pytest

from rental_kernel.domain.dtos import BuildingSiteSnapshot, DeliveryDirection, RawDeliveryRecord
from rental_kernel.domain.policy import LedgerPolicy, NegativeSpanPolicy
from rental_kernel.domain.values import Money
from rental_kernel.exceptions import InvalidQuantityError, MixedBuildingSitesError
from rental_services import SiteLedgerService

ANDAIME = 1
ESCORA = 2


@pytest.fixture
def site(make_record, catalogue):
    return BuildingSiteSnapshot(
        site_id=3,
        name="Edificio Aurora",
        client_name="Construtora Sol",
        address="Rua das Flores, 100",
        deliveries=[
            make_record(10, day=0, record_id=1),
            make_record(4, day=0, equipment_id=ESCORA, record_id=2),
            make_record(-3, day=3, record_id=3),
            make_record(0, day=4, equipment_id=ESCORA, record_id=4),
        ],
        catalogue=catalogue,
    )


@pytest.fixture
def service(deterministic_clock):
    return SiteLedgerService(clock=deterministic_clock)


class TestCompute:
    def test_uses_clock(self, service, site):
        ledger = service.compute(site)
        assert ledger.evaluated_at == datetime(2024, 1, 10, 12, tzinfo=timezone.utc)
        assert [r.day_span for r in ledger[ANDAIME].rows] == [3, 6]

    def test_as_of_overrides_clock(self, service, site):
        ledger = service.compute(site, as_of=date(2024, 1, 5))
        assert [r.day_span for r in ledger[ANDAIME].rows] == [3, 1]

    def test_clock_advance_changes_result(self, deterministic_clock, site):
        service = SiteLedgerService(clock=deterministic_clock)
        before = service.compute(site)
        deterministic_clock.advance(days=2)
        after = service.compute(site)
        assert after[ANDAIME].total.amount - before[ANDAIME].total.amount == 7 * 2 * 10

    def test_policy_is_applied(self, deterministic_clock, site):
        service = SiteLedgerService(
            clock=deterministic_clock,
            policy=LedgerPolicy(negative_span=NegativeSpanPolicy.CLAMP),
        )
        ledger = service.compute(site, as_of=date(2024, 1, 2))
        assert ledger[ANDAIME].rows[-1].day_span == 0

    def test_validation_error_propagates(self, service, site):
        bad = RawDeliveryRecord(ANDAIME, -1, DeliveryDirection.ADD, date(2024, 1, 1), 3, 9)
        broken = BuildingSiteSnapshot(
            site_id=3, name="x", deliveries=[*site.deliveries, bad], catalogue=site.catalogue,
        )
        with pytest.raises(InvalidQuantityError):
            service.compute(broken)


class TestBuildView:
    def test_view_contents(self, service, site):
        view = service.build_view(site)

        assert view.ok
        assert view.name == "Edificio Aurora"
        assert view.client_name == "Construtora Sol"
        assert view.on_hand == {"Andaime": 7, "Escora": 4}
        assert view.ledger.grand_total == Money.of("810.00", "BRL")

    def test_timeline_newest_first_without_zero_entries(self, service, site):
        view = service.build_view(site)

        assert [e.record_id for e in view.timeline] == [3, 2, 1]
        latest = view.timeline[0]
        assert latest.direction is DeliveryDirection.REMOVE
        assert latest.quantity == 3
        assert latest.equipment_name == "Andaime"

    def test_anomalies_listed(self, service, site):
        view = service.build_view(site, as_of=date(2024, 1, 2))
        assert [a.kind.value for a in view.anomalies] == ["NEGATIVE_DAY_SPAN"]

    def test_invalid_site_gives_error_view(self, service, make_record, catalogue, captured_logs):
        mixed = BuildingSiteSnapshot(
            site_id=3,
            name="Obra",
            deliveries=[make_record(1, site_id=3), make_record(1, site_id=4)],
            catalogue=catalogue,
        )

        view = service.build_view(mixed)

        assert not view.ok
        assert view.error_code == MixedBuildingSitesError.code
        assert view.ledger is None
        assert view.on_hand == {}
        (warning,) = [r for r in captured_logs() if r["message"] == "site_ledger_rejected"]
        assert warning["building_site_id"] == "3"

    def test_site_id_bound_to_logs(self, service, site, captured_logs):
        service.build_view(site)
        (built,) = [r for r in captured_logs() if r["message"] == "site_ledger_view_built"]
        assert built["building_site_id"] == "3"
        assert built["timeline_count"] == 3

    def test_to_dict(self, service, site):
        data = service.build_view(site).to_dict()
        assert data["on_hand"] == {"Andaime": 7, "Escora": 4}
        assert data["ledger"]["grand_total"] == "810.00"
        assert data["error_code"] is None

    def test_unparseable_as_of_gives_error_view(self, service, site, deterministic_clock):
        view = service.build_view(site, as_of="not-a-date")

        assert not view.ok
        assert view.error_code == "INVALID_MOVEMENT_DATE"
        assert "as_of" in view.error_message
        assert view.evaluated_at == deterministic_clock.now()
        assert view.ledger is None

    def test_error_view_keeps_valid_as_of(self, service, make_record, catalogue):
        mixed = BuildingSiteSnapshot(
            site_id=3,
            name="Obra",
            deliveries=[make_record(1, site_id=3), make_record(1, site_id=4)],
            catalogue=catalogue,
        )
        view = service.build_view(mixed, as_of=date(2024, 1, 2))
        assert view.evaluated_at == datetime(2024, 1, 2)
