"""rental_services -- clock-aware orchestration over the pure ledger engines."""

from rental_services.site_ledger_service import (
    SiteLedgerService,
    SiteLedgerView,
    TimelineEntry,
)

__all__ = ["SiteLedgerService", "SiteLedgerView", "TimelineEntry"]
