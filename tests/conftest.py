"""
Pytest fixtures for the rental ledger test suite.

Provides:
- Structured logging configured for the whole session
- ``captured_logs`` for asserting on emitted log records
- Record / catalogue factories shared by engine and service tests
"""

import json
import logging
from datetime import date, datetime, timedelta, timezone
from io import StringIO

import pytest

from rental_kernel.domain.clock import DeterministicClock
from rental_kernel.domain.dtos import DeliveryDirection, RawDeliveryRecord, RentableItem
from rental_kernel.domain.values import Money
from rental_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

D0 = date(2024, 1, 1)
SITE_ID = 3
ANDAIME = 1
ESCORA = 2


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture rental_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_ledger(...)
            logs = captured_logs()
            assert any(r["message"] == "ledger_computation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("rental_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain factories
# =============================================================================


@pytest.fixture
def d0() -> date:
    return D0


@pytest.fixture
def make_record():
    """
    Factory for RawDeliveryRecord.

    A positive ``qty`` is a delivery, a negative one a pickup; ``day`` is
    an offset in days from 2024-01-01.
    """

    def _make(
        qty: int,
        day: int = 0,
        *,
        equipment_id: int = ANDAIME,
        record_id: int | None = None,
        site_id: int | None = SITE_ID,
    ) -> RawDeliveryRecord:
        return RawDeliveryRecord(
            equipment_id=equipment_id,
            magnitude=abs(qty),
            direction=DeliveryDirection.ADD if qty >= 0 else DeliveryDirection.REMOVE,
            occurred_at=D0 + timedelta(days=day),
            building_site_id=site_id,
            record_id=record_id,
        )

    return _make


@pytest.fixture
def catalogue() -> dict[int, RentableItem]:
    return {
        ANDAIME: RentableItem(ANDAIME, "Andaime", Money.of("10.00", "BRL")),
        ESCORA: RentableItem(ESCORA, "Escora", Money.of("2.50", "BRL")),
    }


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc))
