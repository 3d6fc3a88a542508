"""
Instants -- coercion of persisted dates into comparable datetimes.

Persistence layers return dates as ``date``, ``datetime`` or ISO-8601
strings. The ledger orders and subtracts them, so each is coerced to a
``datetime`` first. A ``date`` becomes midnight of that day.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from rental_kernel.exceptions import InvalidMovementDateError


def coerce_instant(value: Any, *, record_id: Any = None, field: str = "occurred_at") -> datetime:
    """
    Coerce a persisted date value to ``datetime``.

    Raises:
        InvalidMovementDateError: if ``value`` is None, an unparseable
            string, or of an unsupported type.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidMovementDateError(value, record_id, field) from e
    raise InvalidMovementDateError(value, record_id, field)


def is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None
