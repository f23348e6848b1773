"""Per-subscription and collection-wide statistics for tracked subscriptions."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from subtrack.schemas.subscription import SubscriptionRecord
from subtrack.services.cost_accumulation import (
    ZERO,
    accumulate_cost,
    average_daily_cost,
    average_monthly_cost,
    cycle_daily_rate,
    cycle_monthly_rate,
    elapsed_days,
    elapsed_months,
    format_elapsed_duration,
)
from subtrack.services.cycles import CycleDefinition, normalize_cycle
from subtrack.services.renewal_dates import previous_renewal_boundary


class SubscriptionState(str, Enum):
    FUTURE = "future"
    ACTIVE = "active"
    OVERDUE = "overdue"
    PAUSED = "paused"


@dataclass(frozen=True)
class SubscriptionStatistics:
    accumulated_cost: Decimal
    accumulated_duration_label: str
    average_monthly_cost: Decimal
    average_daily_cost: Decimal
    completed_cycle_count: int
    days_until_renewal: int
    is_overdue: bool
    current_cycle_start: date | None = None


@dataclass(frozen=True)
class GlobalStatistics:
    total_daily_cost: Decimal = ZERO
    total_monthly_cost: Decimal = ZERO
    active_count: int = 0
    overdue_count: int = 0
    paused_count: int = 0
    one_time_purchase_total_value: Decimal = ZERO
    one_time_purchase_daily_value: Decimal = ZERO
    total_subscriptions: int = 0
    total_cost: Decimal = ZERO


def record_cycle(record: SubscriptionRecord) -> CycleDefinition:
    return normalize_cycle(record.cycle_kind, record.cycle_duration)


def one_time_daily_value(record: SubscriptionRecord, today: date) -> Decimal:
    """Amortized cost of ownership per day for a one-time purchase."""
    days_since_start = (today - record.start_date).days
    return record.price / max(days_since_start, 1)


def compute_statistics(record: SubscriptionRecord, today: date) -> SubscriptionStatistics:
    """Compute the statistics shown for a single subscription.

    Averages come from the accumulated history once at least one cycle has been
    billed; before that they are derived from the cycle price directly.
    One-time purchases never renew, so they are never overdue and have no
    current cycle.
    """
    label = format_elapsed_duration(record.start_date, today)

    if record.is_one_time:
        cost = record.price if record.start_date <= today else ZERO
        return SubscriptionStatistics(
            accumulated_cost=cost,
            accumulated_duration_label=label,
            average_monthly_cost=average_monthly_cost(
                cost, elapsed_months(record.start_date, today)
            ),
            average_daily_cost=average_daily_cost(cost, elapsed_days(record.start_date, today)),
            completed_cycle_count=0,
            days_until_renewal=0,
            is_overdue=False,
        )

    cycle = record_cycle(record)
    cost, cycles = accumulate_cost(record.start_date, cycle, today, record.price)
    if cycles > 0:
        monthly = average_monthly_cost(cost, elapsed_months(record.start_date, today))
        daily = average_daily_cost(cost, elapsed_days(record.start_date, today))
    else:
        monthly = cycle_monthly_rate(record.price, cycle)
        daily = cycle_daily_rate(record.price, cycle)

    days_until_renewal = (record.next_renewal_date - today).days
    return SubscriptionStatistics(
        accumulated_cost=cost,
        accumulated_duration_label=label,
        average_monthly_cost=monthly,
        average_daily_cost=daily,
        completed_cycle_count=cycles,
        days_until_renewal=days_until_renewal,
        is_overdue=days_until_renewal < 0,
        current_cycle_start=previous_renewal_boundary(record.start_date, cycle, today),
    )


def aggregate_global_statistics(
    records: Iterable[SubscriptionRecord],
    today: date,
) -> GlobalStatistics:
    """Aggregate statistics across a collection of subscriptions.

    Active, paused and overdue are independent tallies over the same records,
    not a partition. One-time purchases are amortized separately and only
    contribute their price to total_cost.
    """
    total_daily = ZERO
    total_monthly = ZERO
    active = overdue = paused = total = 0
    one_time_total = ZERO
    one_time_daily = ZERO
    total_cost = ZERO

    for record in records:
        total += 1
        if record.is_active and not record.is_paused:
            active += 1
        if record.is_paused:
            paused += 1

        if record.is_one_time:
            one_time_total += record.price
            one_time_daily += one_time_daily_value(record, today)
            total_cost += record.price
            continue

        stats = compute_statistics(record, today)
        if stats.is_overdue:
            overdue += 1
        total_daily += stats.average_daily_cost
        total_monthly += stats.average_monthly_cost
        total_cost += stats.accumulated_cost

    return GlobalStatistics(
        total_daily_cost=total_daily,
        total_monthly_cost=total_monthly,
        active_count=active,
        overdue_count=overdue,
        paused_count=paused,
        one_time_purchase_total_value=one_time_total,
        one_time_purchase_daily_value=one_time_daily,
        total_subscriptions=total,
        total_cost=total_cost,
    )


def subscription_state(record: SubscriptionRecord, today: date) -> SubscriptionState:
    """Place a subscription in its lifecycle state as of today."""
    if record.is_paused:
        return SubscriptionState.PAUSED
    if today < record.start_date:
        return SubscriptionState.FUTURE
    if not record.is_one_time and today > record.next_renewal_date:
        return SubscriptionState.OVERDUE
    return SubscriptionState.ACTIVE
