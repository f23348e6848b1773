from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from subtrack.models.subscription import Subscription
from subtrack.schemas.subscription import SubscriptionCreate


class SubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, skip: int = 0, limit: int = 100) -> list[Subscription]:
        return (
            self.db.query(Subscription)
            .order_by(Subscription.next_renewal_date, Subscription.name)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_every(self) -> list[Subscription]:
        return self.db.query(Subscription).all()

    def count(self) -> int:
        return self.db.query(Subscription).count()

    def get_by_id(self, subscription_id: UUID) -> Subscription | None:
        return self.db.query(Subscription).filter(Subscription.id == subscription_id).first()

    def get_auto_renewing_due(self, today: date) -> list[Subscription]:
        """Active, unpaused, auto-renewing recurring subscriptions whose renewal date has passed."""
        return (
            self.db.query(Subscription)
            .filter(
                Subscription.auto_renewal.is_(True),
                Subscription.is_active.is_(True),
                Subscription.is_paused.is_(False),
                Subscription.is_one_time.is_(False),
                Subscription.next_renewal_date < today,
            )
            .all()
        )

    def create(self, data: SubscriptionCreate, next_renewal_date: date) -> Subscription:
        subscription = Subscription(
            name=data.name,
            category=data.category,
            price=data.price,
            currency=data.currency,
            cycle_kind=data.cycle_kind.value,
            cycle_duration=data.cycle_duration,
            start_date=data.start_date,
            next_renewal_date=next_renewal_date,
            auto_renewal=data.auto_renewal,
            is_one_time=data.is_one_time,
            note=data.note,
        )
        self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def update(self, subscription_id: UUID, update_data: dict[str, Any]) -> Subscription | None:
        subscription = self.get_by_id(subscription_id)
        if not subscription:
            return None
        # Convert cycle_kind enum to string value if present
        if "cycle_kind" in update_data:
            if update_data["cycle_kind"] is not None:
                update_data["cycle_kind"] = update_data["cycle_kind"].value
            else:
                del update_data["cycle_kind"]
        for key, value in update_data.items():
            setattr(subscription, key, value)
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def delete(self, subscription_id: UUID) -> bool:
        subscription = self.get_by_id(subscription_id)
        if not subscription:
            return False
        self.db.delete(subscription)
        self.db.commit()
        return True

    def update_renewal_date(self, subscription_id: UUID, next_renewal_date: date) -> Subscription | None:
        subscription = self.get_by_id(subscription_id)
        if not subscription:
            return None
        subscription.next_renewal_date = next_renewal_date  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def set_auto_renewal(self, subscription_id: UUID, enabled: bool) -> Subscription | None:
        subscription = self.get_by_id(subscription_id)
        if not subscription:
            return None
        subscription.auto_renewal = enabled  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def set_paused(self, subscription_id: UUID, paused: bool) -> Subscription | None:
        subscription = self.get_by_id(subscription_id)
        if not subscription:
            return None
        subscription.is_paused = paused  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(subscription)
        return subscription
