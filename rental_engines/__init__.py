"""
Module: rental_engines
Responsibility:
    Package entrypoint re-exporting the rental ledger pipeline.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import rental_kernel. MUST NOT import rental_services,
    rental_config or rental_ingestion.

Invariants enforced:
    - Purity: engines never call ``datetime.now()``; the evaluation instant
      is a parameter.
    - Decimal-only arithmetic for every amount.
    - Determinism: identical inputs always produce equal outputs.

Usage:
    from rental_engines import compute_ledger, detect_anomalies
"""

from rental_engines.anomalies import AnomalyKind, LedgerAnomaly, detect_anomalies
from rental_engines.billing import PricedRows, price_rows, resolve_unit_price
from rental_engines.grouper import group_movements
from rental_engines.intervals import assign_day_spans, days_between
from rental_engines.ledger import (
    EquipmentGroup,
    LedgerResult,
    LedgerRow,
    SiteLedger,
    build_ledger_rows,
)
from rental_engines.normalizer import normalize, normalize_all
from rental_engines.pipeline import compute_ledger

__all__ = [
    "AnomalyKind",
    "EquipmentGroup",
    "LedgerAnomaly",
    "LedgerResult",
    "LedgerRow",
    "PricedRows",
    "SiteLedger",
    "assign_day_spans",
    "build_ledger_rows",
    "compute_ledger",
    "days_between",
    "detect_anomalies",
    "group_movements",
    "normalize",
    "normalize_all",
    "price_rows",
    "resolve_unit_price",
]
