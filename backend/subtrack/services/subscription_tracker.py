"""Service tying the renewal engine to persisted subscriptions: creation, renewal, auto-renewal and pausing."""

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from subtrack.models.subscription import Subscription
from subtrack.repositories.subscription_repository import SubscriptionRepository
from subtrack.schemas.subscription import SubscriptionCreate, SubscriptionRecord, SubscriptionUpdate
from subtrack.services.cycles import normalize_cycle, parse_cycle_or_default
from subtrack.services.renewal_dates import advance_cycles, next_renewal_on_or_after
from subtrack.services.renewal_options import RenewalOption, build_renewal_options
from subtrack.services.subscription_statistics import (
    GlobalStatistics,
    SubscriptionState,
    SubscriptionStatistics,
    aggregate_global_statistics,
    compute_statistics,
    record_cycle,
    subscription_state,
)

logger = logging.getLogger(__name__)

# Editing any of these moves the renewal schedule
_SCHEDULE_FIELDS = ("cycle_kind", "cycle_duration", "start_date")
_NULLABLE_FIELDS = ("category", "note")


def to_record(subscription: Subscription) -> SubscriptionRecord:
    """Build an engine record from a persisted row, tolerating a corrupted cycle."""
    cycle = parse_cycle_or_default(subscription.cycle_kind, subscription.cycle_duration)
    return SubscriptionRecord(
        id=subscription.id,
        name=str(subscription.name),
        price=Decimal(str(subscription.price)),
        cycle_kind=cycle.kind,
        cycle_duration=cycle.duration,
        start_date=subscription.start_date,
        next_renewal_date=subscription.next_renewal_date,
        is_active=bool(subscription.is_active),
        is_paused=bool(subscription.is_paused),
        auto_renewal=bool(subscription.auto_renewal),
        is_one_time=bool(subscription.is_one_time),
    )


class SubscriptionTrackerService:
    """Service for tracked subscriptions: scheduling, renewals and statistics."""

    def __init__(self, db: Session):
        self.db = db
        self.subscription_repo = SubscriptionRepository(db)

    def get_subscription(self, subscription_id: UUID) -> Subscription:
        subscription = self.subscription_repo.get_by_id(subscription_id)
        if not subscription:
            raise ValueError(f"Subscription {subscription_id} not found")
        return subscription

    def create_subscription(self, data: SubscriptionCreate, today: date) -> Subscription:
        """Create a subscription with its first renewal date computed as of today.

        One-time purchases never renew; their renewal date stays on the start date.
        """
        if data.is_one_time:
            next_renewal = data.start_date
        else:
            cycle = normalize_cycle(data.cycle_kind, data.cycle_duration)
            next_renewal = next_renewal_on_or_after(data.start_date, cycle, today)
        subscription = self.subscription_repo.create(data, next_renewal)
        logger.info(
            "Created subscription %s (%s), next renewal %s",
            subscription.id,
            subscription.name,
            next_renewal,
        )
        return subscription

    def update_subscription(
        self,
        subscription_id: UUID,
        data: SubscriptionUpdate,
        today: date,
    ) -> Subscription:
        """Apply edits; changing the cycle or start date recomputes the renewal date."""
        subscription = self.get_subscription(subscription_id)
        update_data = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in _NULLABLE_FIELDS
        }

        if any(update_data.get(field) is not None for field in _SCHEDULE_FIELDS):
            record = to_record(subscription)
            cycle = normalize_cycle(
                update_data.get("cycle_kind") or record.cycle_kind,
                update_data.get("cycle_duration") or record.cycle_duration,
            )
            start_date = update_data.get("start_date") or record.start_date
            if subscription.is_one_time:
                update_data["next_renewal_date"] = start_date
            else:
                update_data["next_renewal_date"] = next_renewal_on_or_after(
                    start_date, cycle, today
                )
            logger.info(
                "Rescheduled subscription %s, next renewal %s",
                subscription_id,
                update_data["next_renewal_date"],
            )

        updated = self.subscription_repo.update(subscription_id, update_data)
        if not updated:
            raise ValueError(f"Subscription {subscription_id} not found")
        return updated

    def delete_subscription(self, subscription_id: UUID) -> None:
        if not self.subscription_repo.delete(subscription_id):
            raise ValueError(f"Subscription {subscription_id} not found")

    def get_statistics(
        self,
        subscription_id: UUID,
        today: date,
    ) -> tuple[SubscriptionStatistics, SubscriptionState]:
        record = to_record(self.get_subscription(subscription_id))
        return compute_statistics(record, today), subscription_state(record, today)

    def get_renewal_options(self, subscription_id: UUID, today: date) -> list[RenewalOption]:
        record = to_record(self.get_subscription(subscription_id))
        if record.is_one_time:
            raise ValueError("One-time purchases cannot be renewed")
        return build_renewal_options(today, record_cycle(record), record.price)

    def renew(self, subscription_id: UUID, cycle_count: int, today: date) -> Subscription:
        """Manually renew a subscription for cycle_count cycles counted from today.

        Args:
            subscription_id: The subscription to renew.
            cycle_count: Number of cycles paid for.
            today: The renewal date.

        Returns:
            The subscription with its advanced renewal date.

        Raises:
            ValueError: If the subscription is missing, paused or a one-time purchase.
        """
        record = to_record(self.get_subscription(subscription_id))
        if record.is_one_time:
            raise ValueError("One-time purchases cannot be renewed")
        if record.is_paused:
            raise ValueError("Cannot renew a paused subscription")
        if cycle_count < 1:
            raise ValueError("Cycle count must be at least 1")

        new_date = advance_cycles(today, record_cycle(record), cycle_count)
        subscription = self.subscription_repo.update_renewal_date(subscription_id, new_date)
        if not subscription:
            raise ValueError(f"Subscription {subscription_id} not found")
        logger.info(
            "Renewed subscription %s for %d cycle(s): %s -> %s",
            subscription_id,
            cycle_count,
            record.next_renewal_date,
            new_date,
        )
        return subscription

    def toggle_auto_renewal(self, subscription_id: UUID, today: date) -> Subscription:
        """Flip auto-renewal; enabling it re-anchors an overdue renewal date."""
        subscription = self.get_subscription(subscription_id)
        enabled = not subscription.auto_renewal
        subscription = self.subscription_repo.set_auto_renewal(subscription_id, enabled)  # type: ignore[assignment]
        logger.info("Auto-renewal for subscription %s set to %s", subscription_id, enabled)
        if enabled:
            self._reanchor(subscription, today)
        return subscription

    def pause(self, subscription_id: UUID) -> Subscription:
        subscription = self.get_subscription(subscription_id)
        if subscription.is_paused:
            raise ValueError("Subscription is already paused")
        logger.info("Pausing subscription %s", subscription_id)
        return self.subscription_repo.set_paused(subscription_id, True)  # type: ignore[return-value]

    def resume(self, subscription_id: UUID) -> Subscription:
        subscription = self.get_subscription(subscription_id)
        if not subscription.is_paused:
            raise ValueError("Subscription is not paused")
        logger.info("Resuming subscription %s", subscription_id)
        return self.subscription_repo.set_paused(subscription_id, False)  # type: ignore[return-value]

    def refresh_auto_renewals(self, today: date) -> int:
        """Move every overdue auto-renewing subscription to its next renewal after today.

        Returns:
            Number of subscriptions whose renewal date changed.
        """
        count = 0
        for subscription in self.subscription_repo.get_auto_renewing_due(today):
            if self._reanchor(subscription, today):
                count += 1
        return count

    def get_global_statistics(self, today: date) -> GlobalStatistics:
        records = [to_record(s) for s in self.subscription_repo.get_every()]
        return aggregate_global_statistics(records, today)

    def _reanchor(self, subscription: Subscription, today: date) -> bool:
        record = to_record(subscription)
        if (
            record.is_one_time
            or record.is_paused
            or not record.is_active
            or record.next_renewal_date >= today
        ):
            return False
        new_date = next_renewal_on_or_after(record.start_date, record_cycle(record), today)
        self.subscription_repo.update_renewal_date(subscription.id, new_date)  # type: ignore[arg-type]
        logger.info(
            "Auto-renewed subscription %s: %s -> %s",
            subscription.id,
            record.next_renewal_date,
            new_date,
        )
        return True
