#!/usr/bin/env python3
"""
Print the rental ledger of one building site from a snapshot file.

Usage:
    python3 scripts/view_site_ledger.py SNAPSHOT
    python3 scripts/view_site_ledger.py SNAPSHOT --as-of 2024-03-01
    python3 scripts/view_site_ledger.py SNAPSHOT --json
    python3 scripts/view_site_ledger.py SNAPSHOT --config my_policy.yaml

SNAPSHOT is a JSON or YAML file with ``site``, ``rentables`` and
``deliveries`` (see rental_ingestion.adapters.snapshot_file).

Exit codes: 0 on success, 1 if the site's records are invalid.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 72


def banner(title: str) -> None:
    print()
    print("=" * W)
    print(f"  {title}")
    print("=" * W)


def _money(value) -> str:
    return "n/a" if value is None else f"{value.round().amount:>12}"


def print_view(view) -> None:
    banner(view.name)
    if view.client_name:
        print(f"  Client:  {view.client_name}")
    if view.address:
        print(f"  Address: {view.address}")
    print(f"  As of:   {view.evaluated_at.isoformat()}")

    if not view.ok:
        print()
        print(f"  ERROR [{view.error_code}]: {view.error_message}")
        return

    for name, balance in view.on_hand.items():
        print(f"  {balance:>6}  {name}")

    ledger = view.ledger
    for result in ledger.values():
        print()
        print(f"--- {result.name or f'#{result.equipment_id}'} ---")
        print(f"  {'date':<12}{'delta':>8}{'balance':>9}{'days':>6}{'cost':>14}")
        for row in result.rows:
            print(
                f"  {row.occurred_at.date().isoformat():<12}{row.delta:>8}"
                f"{row.balance:>9}{row.day_span:>6}  {_money(row.cost)}"
            )
        if result.cost_available:
            print(f"  {'total':<35}  {_money(result.total)}")
        else:
            print(f"  price unavailable ({result.cost_error.code})")

    print()
    print(f"  Grand total ({ledger.currency.code}): {_money(ledger.grand_total)}")
    if view.anomalies:
        print()
        print("  Review:")
        for anomaly in view.anomalies:
            print(f"    {anomaly.kind.value:<18} equipment {anomaly.equipment_id}: {anomaly.detail}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print a building site's rental ledger.")
    parser.add_argument("snapshot", type=Path, help="JSON or YAML site snapshot")
    parser.add_argument("--as-of", default=None, help="Evaluation date/time (ISO-8601); default now")
    parser.add_argument("--config", type=Path, default=None, help="Ledger policy YAML")
    parser.add_argument("--json", action="store_true", help="Print the view as JSON")
    parser.add_argument("--verbose", action="store_true", help="Emit structured logs to stderr")
    args = parser.parse_args(argv)

    if not args.verbose:
        logging.getLogger("rental_kernel").setLevel(logging.CRITICAL)

    from rental_config import get_active_policy
    from rental_ingestion import load_site_snapshot
    from rental_kernel.domain.clock import SystemClock
    from rental_kernel.exceptions import ValidationError
    from rental_kernel.logging_config import configure_logging
    from rental_services import SiteLedgerService

    if args.verbose:
        configure_logging(level=logging.DEBUG)

    policy = get_active_policy(args.config)
    try:
        site = load_site_snapshot(args.snapshot)
    except ValidationError as e:
        print(f"  ERROR [{e.code}]: {e}", file=sys.stderr)
        return 1
    view = SiteLedgerService(clock=SystemClock(), policy=policy).build_view(site, as_of=args.as_of)

    if args.json:
        print(json.dumps(view.to_dict(), indent=2, default=str))
    else:
        print_view(view)
    return 0 if view.ok else 1


if __name__ == "__main__":
    sys.exit(main())
