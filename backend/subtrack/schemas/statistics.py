from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from subtrack.services.subscription_statistics import SubscriptionState


class SubscriptionStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    accumulated_cost: Decimal
    accumulated_duration_label: str
    average_monthly_cost: Decimal
    average_daily_cost: Decimal
    completed_cycle_count: int
    days_until_renewal: int
    is_overdue: bool
    current_cycle_start: date | None = None
    state: SubscriptionState


class RenewalOptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cycle_count: int
    label: str
    total_cost: Decimal
    new_renewal_date: date


class GlobalStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_daily_cost: Decimal
    total_monthly_cost: Decimal
    active_count: int
    overdue_count: int
    paused_count: int
    one_time_purchase_total_value: Decimal
    one_time_purchase_daily_value: Decimal
    total_subscriptions: int
    total_cost: Decimal
