"""
rental_config -- single public entrypoint for ledger configuration.

Responsibility:
    ``get_active_policy()`` is the only way runtime code obtains a
    ``LedgerPolicy``. YAML loading is internal to this package.

Architecture position:
    Sits above ``rental_kernel`` and below ``rental_services`` and the
    scripts. Engines never import this package; they receive a
    ``LedgerPolicy``.

Audit relevance:
    Every call emits a ``RENTAL_CONFIG_TRACE`` log entry with the config
    id, version and checksum, tying each computed ledger to the rules
    that produced it.
"""

from __future__ import annotations

from pathlib import Path

from rental_config.loader import load_config_set
from rental_config.schema import LedgerConfigSet
from rental_kernel.domain.policy import LedgerPolicy
from rental_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> LedgerConfigSet:
    """
    Load and parse the ledger configuration set.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError / KeyError: if the file is not a valid configuration set.
    """
    config = load_config_set(Path(config_path) if config_path else DEFAULT_CONFIG_PATH)
    _logger.info(
        "RENTAL_CONFIG_TRACE",
        extra={
            "trace_type": "RENTAL_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "currency": config.currency,
            "day_span_mode": config.day_span_mode.value,
            "negative_span": config.negative_span.value,
        },
    )
    return config


def get_active_policy(config_path: Path | None = None) -> LedgerPolicy:
    """The runtime entrypoint: the ``LedgerPolicy`` engines should use."""
    return get_active_config(config_path).to_policy()


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "LedgerConfigSet",
    "get_active_config",
    "get_active_policy",
]
