"""
Configuration Loader (``rental_config.loader``).

Loads a YAML ledger configuration file and parses it into a frozen
``LedgerConfigSet``. Runtime callers go through
``rental_config.get_active_policy()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown enum values or currency  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from rental_kernel.domain.currency import CurrencyRegistry
from rental_kernel.domain.policy import DaySpanMode, NegativeSpanPolicy
from rental_config.schema import LedgerConfigSet


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file and return its contents as a dict."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    return data


def _parse_enum(enum_type: type, value: Any, key: str):
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_type)
        raise ValueError(f"Invalid {key} {value!r}; expected one of: {allowed}") from e


def parse_config_set(data: dict[str, Any]) -> LedgerConfigSet:
    """
    Parse a ``LedgerConfigSet`` from a dict.

    Raises:
        KeyError: if ``config_id`` or ``currency`` is missing.
        ValueError: on unknown currency, span mode or negative-span policy.
    """
    currency = str(data["currency"]).upper().strip()
    if not CurrencyRegistry.is_valid(currency):
        raise ValueError(f"Invalid currency {data['currency']!r}")

    day_span = data.get("day_span") or {}
    return LedgerConfigSet(
        config_id=str(data["config_id"]),
        version=int(data.get("version", 1)),
        currency=currency,
        day_span_mode=_parse_enum(DaySpanMode, day_span.get("mode", "calendar"), "day_span.mode"),
        negative_span=_parse_enum(
            NegativeSpanPolicy, day_span.get("negative", "surface"), "day_span.negative"
        ),
        checksum=compute_checksum(data),
        description=str(data.get("description", "")),
    )


def load_config_set(path: Path) -> LedgerConfigSet:
    return parse_config_set(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization; deterministic for equal data."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
