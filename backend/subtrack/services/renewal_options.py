"""Manual renewal options offered for subscriptions without auto-renewal."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from subtrack.models.subscription import CycleKind
from subtrack.services.cost_accumulation import to_decimal
from subtrack.services.cycles import CycleDefinition
from subtrack.services.renewal_dates import advance_cycles

# 1/3/6/12 months, 1/2/4 quarters, 1/2/3 years
RENEWAL_OPTION_COUNTS: dict[CycleKind, tuple[int, ...]] = {
    CycleKind.MONTHLY: (1, 3, 6, 12),
    CycleKind.QUARTERLY: (1, 2, 4),
    CycleKind.YEARLY: (1, 2, 3),
}

_UNIT_NAMES = {
    CycleKind.MONTHLY: "month",
    CycleKind.QUARTERLY: "quarter",
    CycleKind.YEARLY: "year",
}


@dataclass(frozen=True)
class RenewalOption:
    cycle_count: int
    label: str
    total_cost: Decimal
    new_renewal_date: date


def renewal_option_counts(kind: CycleKind) -> list[int]:
    """Return the cycle counts offered for manual renewal, ascending."""
    return list(RENEWAL_OPTION_COUNTS[kind])


def renewal_label(cycle: CycleDefinition, count: int) -> str:
    units = cycle.duration * count
    name = _UNIT_NAMES[cycle.kind]
    return f"{units} {name}" if units == 1 else f"{units} {name}s"


def build_renewal_options(
    reference_date: date,
    cycle: CycleDefinition,
    price_per_cycle: Decimal | int | float | str,
) -> list[RenewalOption]:
    """Build the renewal choices for a subscription, priced and dated.

    Args:
        reference_date: Date the renewal is counted from (today for a manual renewal).
        cycle: The subscription's billing cycle.
        price_per_cycle: Price charged per cycle.

    Returns:
        One option per candidate count, ordered by ascending count.
    """
    price = to_decimal(price_per_cycle)
    return [
        RenewalOption(
            cycle_count=count,
            label=renewal_label(cycle, count),
            total_cost=price * count,
            new_renewal_date=advance_cycles(reference_date, cycle, count),
        )
        for count in renewal_option_counts(cycle.kind)
    ]
