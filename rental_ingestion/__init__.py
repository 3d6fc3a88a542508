"""
rental_ingestion -- persistence rows and snapshot files into ledger DTOs.

No ledger logic lives here: records are mapped, never signed, sorted or
priced.
"""

from rental_ingestion.adapters import load_site_snapshot
from rental_ingestion.mapping import (
    catalogue_from_rows,
    record_from_row,
    records_from_delivery_batch,
    records_from_rows,
)

__all__ = [
    "catalogue_from_rows",
    "load_site_snapshot",
    "record_from_row",
    "records_from_delivery_batch",
    "records_from_rows",
]
