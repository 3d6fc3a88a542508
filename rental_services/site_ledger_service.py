"""
SiteLedgerService -- the building-site page's view of its rental ledger.

Responsibility:
    Supplies the evaluation instant from an injected Clock, runs the pure
    ledger pipeline for one building site and assembles everything the
    page renders: on-site counts per equipment, the delivery timeline,
    the ledger rows and totals, and the anomalies to review.

Architecture position:
    Services -- the only layer that touches the clock. Calls
    ``rental_engines``; receives configuration as a ``LedgerPolicy``.

Failure modes:
    - ``compute()`` propagates ValidationError.
    - ``build_view()`` turns ValidationError into a view with
      ``error_code``/``error_message`` and no ledger, so the page shows a
      clear message instead of partial balances. An unparseable
      ``as_of`` is reported the same way, evaluated at the clock's now.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from rental_engines.anomalies import LedgerAnomaly, detect_anomalies
from rental_engines.ledger import SiteLedger
from rental_engines.pipeline import compute_ledger
from rental_kernel.domain.clock import Clock
from rental_kernel.domain.dtos import BuildingSiteSnapshot, DeliveryDirection
from rental_kernel.domain.instants import coerce_instant
from rental_kernel.domain.policy import DEFAULT_POLICY, LedgerPolicy
from rental_kernel.exceptions import ValidationError
from rental_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.site_ledger")


@dataclass(frozen=True)
class TimelineEntry:
    """One delivery or pickup as shown on the site's timeline."""

    occurred_at: datetime
    equipment_id: int
    equipment_name: str
    quantity: int
    direction: DeliveryDirection
    record_id: int | None = None


@dataclass(frozen=True)
class SiteLedgerView:
    """Display-ready ledger of one building site."""

    site_id: int
    name: str
    evaluated_at: datetime
    client_name: str | None = None
    address: str | None = None
    ledger: SiteLedger | None = None
    on_hand: dict[str, int] = field(default_factory=dict)
    timeline: tuple[TimelineEntry, ...] = ()
    anomalies: tuple[LedgerAnomaly, ...] = ()
    error_code: str | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_code is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "site_id": self.site_id,
            "name": self.name,
            "client_name": self.client_name,
            "address": self.address,
            "evaluated_at": self.evaluated_at.isoformat(),
            "on_hand": dict(self.on_hand),
            "ledger": self.ledger.to_dict() if self.ledger is not None else None,
            "anomalies": [
                {
                    "kind": a.kind.value,
                    "equipment_id": a.equipment_id,
                    "record_id": a.record_id,
                    "detail": a.detail,
                }
                for a in self.anomalies
            ],
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class SiteLedgerService:
    """Builds rental ledgers for building sites as of the clock's "now"."""

    def __init__(self, clock: Clock, policy: LedgerPolicy | None = None):
        self._clock = clock
        self._policy = policy or DEFAULT_POLICY

    def _evaluation_instant(self, as_of: datetime | date | str | None) -> datetime:
        if as_of is None:
            return self._clock.now()
        return coerce_instant(as_of, field="as_of")

    def compute(
        self,
        site: BuildingSiteSnapshot,
        as_of: datetime | date | str | None = None,
    ) -> SiteLedger:
        """Run the ledger for ``site``; ValidationError propagates."""
        return compute_ledger(
            movements=site.deliveries,
            catalogue=site.catalogue,
            now=self._evaluation_instant(as_of),
            policy=self._policy,
        )

    def build_view(
        self,
        site: BuildingSiteSnapshot,
        as_of: datetime | date | str | None = None,
    ) -> SiteLedgerView:
        """Compute the ledger and assemble the building-site view."""
        evaluated_at: datetime | None = None
        with LogContext.bind(building_site_id=str(site.site_id)):
            try:
                evaluated_at = self._evaluation_instant(as_of)
                ledger = self.compute(site, evaluated_at)
                timeline = self._timeline(site)
            except ValidationError as e:
                logger.warning("site_ledger_rejected", extra={
                    "error_code": e.code,
                    "record_id": e.record_id,
                    "reason": e.reason,
                })
                return SiteLedgerView(
                    site_id=site.site_id,
                    name=site.name,
                    client_name=site.client_name,
                    address=site.address,
                    evaluated_at=evaluated_at or self._clock.now(),
                    error_code=e.code,
                    error_message=str(e),
                )

            on_hand = {
                self._equipment_name(site, equipment_id): result.balance
                for equipment_id, result in ledger.items()
            }
            anomalies = detect_anomalies(ledger)
            logger.info("site_ledger_view_built", extra={
                "equipment_count": len(ledger),
                "timeline_count": len(timeline),
                "anomaly_count": len(anomalies),
            })
            return SiteLedgerView(
                site_id=site.site_id,
                name=site.name,
                client_name=site.client_name,
                address=site.address,
                evaluated_at=ledger.evaluated_at,
                ledger=ledger,
                on_hand=on_hand,
                timeline=timeline,
                anomalies=anomalies,
            )

    @staticmethod
    def _equipment_name(site: BuildingSiteSnapshot, equipment_id: int) -> str:
        item = site.catalogue.get(equipment_id)
        return item.name if item is not None else f"#{equipment_id}"

    def _timeline(self, site: BuildingSiteSnapshot) -> tuple[TimelineEntry, ...]:
        """Deliveries newest first, zero-quantity entries left out."""
        entries = [
            TimelineEntry(
                occurred_at=coerce_instant(r.occurred_at, record_id=r.record_id),
                equipment_id=r.equipment_id,
                equipment_name=self._equipment_name(site, r.equipment_id),
                quantity=r.magnitude,
                direction=DeliveryDirection.parse(r.direction, r.record_id),
                record_id=r.record_id,
            )
            for r in site.deliveries
            if r.magnitude
        ]
        entries.sort(
            key=lambda e: (e.occurred_at, e.record_id is not None, e.record_id or 0),
            reverse=True,
        )
        return tuple(entries)
