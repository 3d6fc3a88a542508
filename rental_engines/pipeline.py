"""
Module: rental_engines.pipeline
Responsibility:
    ``compute_ledger`` -- the one operation the rest of the application
    calls. Runs Normalizer -> Grouper -> Ledger Builder -> Interval
    Calculator -> Billing Aggregator for one building site.

Architecture position:
    Engines -- pure calculation layer, zero I/O. Holds no state between
    calls, so concurrent calls (other sites, other ``now``) are safe.

Invariants enforced:
    - Identical movements, catalogue, ``now`` and policy always produce
      equal results.
    - Zero-quantity movements are dropped before grouping.
    - A bad record rejects the whole site (ValidationError propagates);
      a missing price only marks that group's cost unavailable.

Usage:
    from rental_engines.pipeline import compute_ledger

    ledger = compute_ledger(
        movements=records,
        catalogue={7: RentableItem(7, "Andaime", Money.of("10.00", "BRL"))},
        now=date(2024, 3, 1),
    )
    ledger[7].rows[-1].balance
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from rental_kernel.domain.dtos import RawDeliveryRecord, RentableItem
from rental_kernel.domain.instants import coerce_instant
from rental_kernel.domain.policy import DEFAULT_POLICY, LedgerPolicy
from rental_kernel.exceptions import ConfigurationError, MixedBuildingSitesError
from rental_kernel.logging_config import get_logger
from rental_engines.billing import price_rows, resolve_unit_price
from rental_engines.grouper import group_movements
from rental_engines.intervals import assign_day_spans
from rental_engines.ledger import (
    EquipmentGroup,
    LedgerResult,
    SiteLedger,
    build_ledger_rows,
    ensure_comparable,
)
from rental_engines.normalizer import normalize_all
from rental_engines.tracer import traced_engine

logger = get_logger("engines.pipeline")


@traced_engine("rental_ledger", "1.0", fingerprint_fields=("movements", "catalogue", "now", "policy"))
def compute_ledger(
    movements: Iterable[RawDeliveryRecord],
    catalogue: Mapping[int, Any],
    now: datetime | date | str,
    policy: LedgerPolicy | None = None,
) -> SiteLedger:
    """
    Compute balances, day-spans and rental cost for one building site.

    Args:
        movements: Delivery records of one building site, in any order.
        catalogue: Equipment id -> RentableItem or bare unit price.
        now: Evaluation instant closing the last interval of each group.
        policy: Day-span and currency rules; defaults to DEFAULT_POLICY.

    Returns:
        SiteLedger mapping equipment id -> LedgerResult.

    Raises:
        ValidationError: any record is invalid (the site is rejected).
    """
    policy = policy or DEFAULT_POLICY
    records = tuple(movements)
    t0 = time.monotonic()
    evaluated_at = coerce_instant(now, field="now")

    logger.info("ledger_computation_started", extra={
        "record_count": len(records),
        "evaluated_at": evaluated_at,
        "day_span_mode": policy.day_span_mode.value,
        "negative_span": policy.negative_span.value,
    })

    normalized = normalize_all(records)
    site_ids = tuple(sorted({m.building_site_id for m in normalized}, key=repr))
    if len(site_ids) > 1:
        raise MixedBuildingSitesError(site_ids)
    building_site_id = site_ids[0] if site_ids else None

    nonzero = [m for m in normalized if m.delta != 0]
    ensure_comparable([
        (coerce_instant(m.occurred_at, record_id=m.record_id), m.record_id)
        for m in nonzero
    ])
    if len(nonzero) != len(normalized):
        logger.debug("zero_movements_dropped", extra={
            "dropped_count": len(normalized) - len(nonzero),
        })

    results: dict[int, LedgerResult] = {}
    for equipment_id, items in sorted(group_movements(nonzero).items()):
        entry = catalogue.get(equipment_id)
        name = entry.name if isinstance(entry, RentableItem) else None
        unit_price = None
        error: ConfigurationError | None = None
        try:
            unit_price = resolve_unit_price(entry, equipment_id, policy.currency, len(items))
        except ConfigurationError as e:
            error = e
            logger.warning("unit_price_unavailable", extra={
                "equipment_id": equipment_id,
                "error_code": e.code,
                "reason": e.reason,
            })

        group = EquipmentGroup(
            equipment_id=equipment_id,
            movements=items,
            building_site_id=building_site_id,
            name=name,
            unit_price=unit_price,
        )
        rows = assign_day_spans(build_ledger_rows(group), evaluated_at, policy)
        priced = price_rows(rows, unit_price, error)
        results[equipment_id] = LedgerResult(
            equipment_id=equipment_id,
            rows=priced.rows,
            name=name,
            unit_price=unit_price,
            total=priced.total,
            cost_error=priced.error,
        )

    ledger = SiteLedger(
        evaluated_at=evaluated_at,
        currency=policy.currency,
        groups=results,
        building_site_id=building_site_id,
    )

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    grand_total = ledger.grand_total
    logger.info("ledger_computation_completed", extra={
        "building_site_id": building_site_id,
        "equipment_count": len(ledger),
        "row_count": sum(len(r.rows) for r in ledger.values()),
        "grand_total": grand_total.amount if grand_total is not None else None,
        "unpriced_count": len(ledger.configuration_errors),
        "duration_ms": duration_ms,
    })
    return ledger
