"""File adapters feeding building-site snapshots into the ledger."""

from rental_ingestion.adapters.snapshot_file import (
    load_site_snapshot,
    read_snapshot_data,
    snapshot_from_data,
)

__all__ = ["load_site_snapshot", "read_snapshot_data", "snapshot_from_data"]
