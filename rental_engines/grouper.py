"""
Grouper.

Partitions a site's movements by equipment id. Relative input order is
preserved inside each group; nothing is dropped or duplicated, and ids
absent from the catalogue are grouped like any other.
"""

from __future__ import annotations

from collections.abc import Iterable

from rental_kernel.domain.dtos import Movement


def group_movements(movements: Iterable[Movement]) -> dict[int, tuple[Movement, ...]]:
    """Return ``{equipment_id: movements}`` in first-seen order of equipment id."""
    groups: dict[int, list[Movement]] = {}
    for movement in movements:
        groups.setdefault(movement.equipment_id, []).append(movement)
    return {equipment_id: tuple(items) for equipment_id, items in groups.items()}
