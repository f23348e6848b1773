"""Renewal date calculation: walking cycle boundaries and previewing renewals."""

from collections.abc import Iterator
from datetime import date

from subtrack.services.cycles import CycleDefinition, add_cycles


def iter_renewal_boundaries(start_date: date, cycle: CycleDefinition) -> Iterator[date]:
    """Yield successive renewal boundaries after start_date in ascending order.

    Each boundary is one cycle after the previous one, so the day of month
    clamped in a short month carries forward (Jan 31 -> Feb 29 -> Mar 29).
    """
    cursor = start_date
    while True:
        cursor = add_cycles(cursor, cycle)
        yield cursor


def next_renewal_on_or_after(
    start_date: date,
    cycle: CycleDefinition,
    reference_date: date,
) -> date:
    """Find the first renewal date strictly after the reference date.

    Args:
        start_date: Date the subscription started (the billing anchor).
        cycle: The validated billing cycle.
        reference_date: "Today" for the caller.

    Returns:
        start_date if it lies in the future, otherwise the earliest boundary
        reached by stepping one cycle at a time from start_date that is after
        reference_date.
    """
    if start_date > reference_date:
        return start_date

    for boundary in iter_renewal_boundaries(start_date, cycle):
        if boundary > reference_date:
            return boundary
    raise AssertionError("unreachable")  # pragma: no cover


def previous_renewal_boundary(
    start_date: date,
    cycle: CycleDefinition,
    reference_date: date,
) -> date | None:
    """Return the latest boundary (start included) on or before reference_date.

    None when the subscription has not started yet.
    """
    if start_date > reference_date:
        return None

    current = start_date
    for boundary in iter_renewal_boundaries(start_date, cycle):
        if boundary > reference_date:
            return current
        current = boundary
    raise AssertionError("unreachable")  # pragma: no cover


def advance_cycles(from_date: date, cycle: CycleDefinition, count: int) -> date:
    """Advance a date by count cycles, one cycle at a time, e.g. to preview a renewal."""
    if count < 0:
        raise ValueError(f"Cycle count must be non-negative, got {count}")
    result = from_date
    for _ in range(count):
        result = add_cycles(result, cycle)
    return result
