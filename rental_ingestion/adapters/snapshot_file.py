"""
Snapshot file adapter.

Reads one building site's data from a JSON or YAML file::

    site: {id: 3, name: Edificio Aurora, client: Construtora Sol, address: ...}
    currency: BRL
    rentables: [{id: 1, name: Andaime, price: "10.00"}, ...]
    deliveries: [{id: 10, rentableId: 1, count: 10, deliveryType: 1,
                  date: 2024-01-01}, ...]

File I/O only; rows are mapped by ``rental_ingestion.mapping``.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from rental_kernel.domain.dtos import BuildingSiteSnapshot
from rental_ingestion.mapping import catalogue_from_rows, records_from_rows


def read_snapshot_data(path: Path) -> dict[str, Any]:
    """Load the raw snapshot dict; JSON numbers with fractions become Decimal."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f, parse_float=Decimal)
        else:
            data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    return data


def snapshot_from_data(data: dict[str, Any]) -> BuildingSiteSnapshot:
    """
    Build a ``BuildingSiteSnapshot`` from a snapshot dict.

    Deliveries without a building site id are attributed to the site.
    """
    site = data.get("site") or {}
    site_id = int(site["id"])
    rows = [
        {**row, "buildingSiteId": row.get("buildingSiteId", site_id)}
        for row in data.get("deliveries") or []
    ]
    return BuildingSiteSnapshot(
        site_id=site_id,
        name=str(site.get("name", f"#{site_id}")),
        client_name=site.get("client"),
        address=site.get("address"),
        deliveries=records_from_rows(rows),
        catalogue=catalogue_from_rows(data.get("rentables") or [], data.get("currency", "BRL")),
    )


def load_site_snapshot(path: Path) -> BuildingSiteSnapshot:
    """Read and map a snapshot file in one step."""
    return snapshot_from_data(read_snapshot_data(path))
