"""EngineerSelectionPolicy — deterministic picks from a roster snapshot."""

from __future__ import annotations

from typing import Iterable

from inquiry_router.domain.entities.engineer import EngineerWorkload


def qualified_engineers(
    engineers: Iterable[EngineerWorkload],
    product_category: str,
) -> list[EngineerWorkload]:
    """Engineers whose skill categories include ``product_category``."""
    return [e for e in engineers if e.is_qualified_for(product_category)]


def pick_lowest_load(candidates: list[EngineerWorkload]) -> EngineerWorkload:
    """Lowest current_inquiries wins; ties go to the lower engineer_id.

    Raises:
        ValueError: if candidates list is empty.
    """
    if not candidates:
        raise ValueError("Cannot pick from an empty candidate list")
    return min(candidates, key=lambda e: (e.current_inquiries, e.engineer_id))


def has_rotation_history(candidates: Iterable[EngineerWorkload]) -> bool:
    """True when at least one candidate carries a last-assigned timestamp."""
    return any(e.last_assigned_at is not None for e in candidates)


def pick_least_recent(candidates: list[EngineerWorkload]) -> EngineerWorkload:
    """Rotation pick: never-assigned first, then the oldest last_assigned_at.

    Remaining ties fall back to (current_inquiries, engineer_id).

    Raises:
        ValueError: if candidates list is empty.
    """
    if not candidates:
        raise ValueError("Cannot pick from an empty candidate list")

    def key(e: EngineerWorkload):
        if e.last_assigned_at is None:
            return (0, 0.0, e.current_inquiries, e.engineer_id)
        return (1, e.last_assigned_at.timestamp(), e.current_inquiries, e.engineer_id)

    return min(candidates, key=key)


def pick_by_skill(
    candidates: list[EngineerWorkload],
    min_skill_level: int | None,
) -> EngineerWorkload | None:
    """Lowest-load engineer among those meeting ``min_skill_level``.

    Returns None when nobody meets the level.
    """
    skilled = [e for e in candidates if e.meets_skill_level(min_skill_level)]
    if not skilled:
        return None
    return pick_lowest_load(skilled)
