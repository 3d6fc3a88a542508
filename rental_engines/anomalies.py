"""
Anomaly detection over a computed site ledger.

Over-pickups, same-day movements, negative spans and missing prices are
valid ledger data, not errors. This module lists them so a person can
review them; it never changes the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from rental_engines.ledger import SiteLedger


class AnomalyKind(str, Enum):
    NEGATIVE_BALANCE = "NEGATIVE_BALANCE"
    ZERO_DAY_SPAN = "ZERO_DAY_SPAN"
    NEGATIVE_DAY_SPAN = "NEGATIVE_DAY_SPAN"
    MISSING_PRICE = "MISSING_PRICE"


@dataclass(frozen=True)
class LedgerAnomaly:
    kind: AnomalyKind
    equipment_id: int
    detail: str
    record_id: int | None = None
    occurred_at: datetime | None = None


def detect_anomalies(ledger: SiteLedger) -> tuple[LedgerAnomaly, ...]:
    """List review-worthy rows, in equipment then row order."""
    found: list[LedgerAnomaly] = []
    for equipment_id, result in ledger.items():
        if result.cost_error is not None:
            found.append(LedgerAnomaly(
                kind=AnomalyKind.MISSING_PRICE,
                equipment_id=equipment_id,
                detail=result.cost_error.code,
            ))
        for row in result.rows:
            if row.balance < 0:
                found.append(LedgerAnomaly(
                    kind=AnomalyKind.NEGATIVE_BALANCE,
                    equipment_id=equipment_id,
                    detail=f"balance {row.balance}",
                    record_id=row.record_id,
                    occurred_at=row.occurred_at,
                ))
            if row.day_span == 0:
                found.append(LedgerAnomaly(
                    kind=AnomalyKind.ZERO_DAY_SPAN,
                    equipment_id=equipment_id,
                    detail="balance held for 0 days",
                    record_id=row.record_id,
                    occurred_at=row.occurred_at,
                ))
            elif row.day_span is not None and row.day_span < 0:
                found.append(LedgerAnomaly(
                    kind=AnomalyKind.NEGATIVE_DAY_SPAN,
                    equipment_id=equipment_id,
                    detail=f"day span {row.day_span}",
                    record_id=row.record_id,
                    occurred_at=row.occurred_at,
                ))
    return tuple(found)
