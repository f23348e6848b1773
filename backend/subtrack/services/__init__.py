from subtrack.services.cost_accumulation import (
    accumulate_cost,
    average_daily_cost,
    average_monthly_cost,
    format_elapsed_duration,
)
from subtrack.services.cycles import CycleDefinition, InvalidCycleError, normalize_cycle
from subtrack.services.renewal_dates import advance_cycles, next_renewal_on_or_after
from subtrack.services.renewal_options import (
    RenewalOption,
    build_renewal_options,
    renewal_option_counts,
)
from subtrack.services.subscription_statistics import (
    GlobalStatistics,
    SubscriptionStatistics,
    aggregate_global_statistics,
    compute_statistics,
)

__all__ = [
    "CycleDefinition",
    "GlobalStatistics",
    "InvalidCycleError",
    "RenewalOption",
    "SubscriptionStatistics",
    "accumulate_cost",
    "advance_cycles",
    "aggregate_global_statistics",
    "average_daily_cost",
    "average_monthly_cost",
    "build_renewal_options",
    "compute_statistics",
    "format_elapsed_duration",
    "next_renewal_on_or_after",
    "normalize_cycle",
    "renewal_option_counts",
]
