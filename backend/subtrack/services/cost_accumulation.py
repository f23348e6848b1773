"""Historical cost accumulation and amortized cost rates for recurring items.

There is no transaction ledger behind a tracked subscription, so accumulated
cost is an approximation: the item is assumed to have been billed exactly once
per elapsed cycle, at full price, with no proration. The opening cycle is
billed on the start date and counts as soon as the reference date is past it;
each later boundary counts when it is on or before the reference date.
"""

from datetime import date
from decimal import Decimal

from subtrack.services.cycles import CycleDefinition, add_months, cycle_length_days, months_per_cycle
from subtrack.services.renewal_dates import iter_renewal_boundaries

ZERO = Decimal("0")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def accumulate_cost(
    start_date: date,
    cycle: CycleDefinition,
    reference_date: date,
    price_per_cycle: Decimal | int | float | str,
) -> tuple[Decimal, int]:
    """Sum the price of every cycle billed between start_date and reference_date.

    Args:
        start_date: Date the first cycle was billed.
        cycle: The validated billing cycle.
        reference_date: Date to accumulate up to (inclusive).
        price_per_cycle: Price charged per cycle.

    Returns:
        Tuple of (accumulated_cost, cycles_completed). (0, 0) when no day has
        elapsed since start_date.
    """
    if start_date >= reference_date:
        return ZERO, 0

    cycles = 1
    for boundary in iter_renewal_boundaries(start_date, cycle):
        if boundary > reference_date:
            break
        cycles += 1
    return to_decimal(price_per_cycle) * cycles, cycles


def _whole_months_between(start_date: date, reference_date: date) -> int:
    months = (reference_date.year - start_date.year) * 12 + (reference_date.month - start_date.month)
    if months > 0 and add_months(start_date, months) > reference_date:
        months -= 1
    return max(months, 0)


def elapsed_period(start_date: date, reference_date: date) -> tuple[int, int, int]:
    """Split the period between two dates into (years, months, days).

    A month is counted with the same clamping rule used for renewals, so
    Jan 31 -> Feb 29 is exactly one month.
    """
    if reference_date <= start_date:
        return 0, 0, 0
    total_months = _whole_months_between(start_date, reference_date)
    days = (reference_date - add_months(start_date, total_months)).days
    return total_months // 12, total_months % 12, days


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_elapsed_duration(start_date: date, reference_date: date) -> str:
    """Render the elapsed period as e.g. "1 year 2 months 5 days"."""
    years, months, days = elapsed_period(start_date, reference_date)
    parts = []
    if years > 0:
        parts.append(_plural(years, "year"))
    if months > 0:
        parts.append(_plural(months, "month"))
    if days > 0:
        parts.append(_plural(days, "day"))
    return " ".join(parts) if parts else "0 days"


def elapsed_months(start_date: date, reference_date: date) -> int:
    """Whole months elapsed, at least 1 once started; 0 before start_date."""
    if reference_date < start_date:
        return 0
    return max(1, _whole_months_between(start_date, reference_date))


def elapsed_days(start_date: date, reference_date: date) -> int:
    """Days elapsed, at least 1 once started; 0 before start_date."""
    if reference_date < start_date:
        return 0
    return max(1, (reference_date - start_date).days)


def average_monthly_cost(accumulated_cost: Decimal, months: int) -> Decimal:
    if months <= 0:
        return ZERO
    return to_decimal(accumulated_cost) / max(months, 1)


def average_daily_cost(accumulated_cost: Decimal, days: int) -> Decimal:
    if days <= 0:
        return ZERO
    return to_decimal(accumulated_cost) / max(days, 1)


def cycle_monthly_rate(price_per_cycle: Decimal | int | float | str, cycle: CycleDefinition) -> Decimal:
    """Monthly rate implied by the cycle price, for items with no billing history yet."""
    return to_decimal(price_per_cycle) / months_per_cycle(cycle)


def cycle_daily_rate(price_per_cycle: Decimal | int | float | str, cycle: CycleDefinition) -> Decimal:
    """Daily rate implied by the cycle price (30.44-day months, 365-day years)."""
    return to_decimal(price_per_cycle) / cycle_length_days(cycle)
