"""
Ledger configuration set schema.

``LedgerConfigSet`` is the human-authored, versioned source artifact
parsed from YAML. ``to_policy()`` bridges it into the kernel's
``LedgerPolicy``, the only configuration type engines accept.
"""

from __future__ import annotations

from dataclasses import dataclass

from rental_kernel.domain.policy import DaySpanMode, LedgerPolicy, NegativeSpanPolicy


@dataclass(frozen=True)
class LedgerConfigSet:
    """A parsed ledger configuration set."""

    config_id: str
    version: int
    currency: str
    day_span_mode: DaySpanMode
    negative_span: NegativeSpanPolicy
    checksum: str
    description: str = ""

    def to_policy(self) -> LedgerPolicy:
        return LedgerPolicy(
            day_span_mode=self.day_span_mode,
            negative_span=self.negative_span,
            currency=self.currency,
        )
