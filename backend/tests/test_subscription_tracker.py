"""Tests for SubscriptionTrackerService against the test database."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from subtrack.models.subscription import CycleKind, Subscription
from subtrack.repositories.subscription_repository import SubscriptionRepository
from subtrack.schemas.subscription import SubscriptionCreate, SubscriptionUpdate
from subtrack.services.subscription_statistics import SubscriptionState
from subtrack.services.subscription_tracker import SubscriptionTrackerService, to_record

TODAY = date(2024, 4, 20)


@pytest.fixture
def service(db_session):
    return SubscriptionTrackerService(db_session)


def _create(service: SubscriptionTrackerService, **kwargs: Any) -> Subscription:
    defaults: dict[str, Any] = {
        "name": "Streaming",
        "price": Decimal("9.99"),
        "cycle_kind": CycleKind.MONTHLY,
        "cycle_duration": 1,
        "start_date": date(2024, 1, 15),
    }
    defaults.update(kwargs)
    return service.create_subscription(SubscriptionCreate(**defaults), TODAY)


class TestCreateSubscription:
    def test_computes_next_renewal(self, service):
        subscription = _create(service)
        assert subscription.next_renewal_date == date(2024, 5, 15)
        assert subscription.cycle_kind == "MONTHLY"
        assert subscription.auto_renewal is True
        assert subscription.is_paused is False

    def test_future_start(self, service):
        subscription = _create(service, start_date=date(2024, 6, 1))
        assert subscription.next_renewal_date == date(2024, 6, 1)

    def test_month_end_start_follows_clamped_day(self, service):
        subscription = _create(service, start_date=date(2024, 1, 31))
        assert subscription.next_renewal_date == date(2024, 4, 29)

    def test_one_time_keeps_start_date(self, service):
        subscription = _create(service, is_one_time=True, start_date=date(2023, 1, 1))
        assert subscription.next_renewal_date == date(2023, 1, 1)


class TestUpdateSubscription:
    def test_cycle_change_reschedules(self, service):
        subscription = _create(service)
        updated = service.update_subscription(
            subscription.id, SubscriptionUpdate(cycle_kind=CycleKind.QUARTERLY), TODAY
        )
        assert updated.cycle_kind == "QUARTERLY"
        assert updated.next_renewal_date == date(2024, 7, 15)

    def test_start_date_change_reschedules(self, service):
        subscription = _create(service)
        updated = service.update_subscription(
            subscription.id, SubscriptionUpdate(start_date=date(2024, 2, 1)), TODAY
        )
        assert updated.next_renewal_date == date(2024, 5, 1)

    def test_name_change_keeps_schedule(self, service, db_session):
        subscription = _create(service)
        SubscriptionRepository(db_session).update_renewal_date(subscription.id, date(2024, 4, 1))
        updated = service.update_subscription(
            subscription.id, SubscriptionUpdate(name="Music"), TODAY
        )
        assert updated.name == "Music"
        assert updated.next_renewal_date == date(2024, 4, 1)

    def test_explicit_null_is_ignored_for_required_fields(self, service):
        subscription = _create(service)
        updated = service.update_subscription(
            subscription.id, SubscriptionUpdate(name=None, note=None), TODAY
        )
        assert updated.name == "Streaming"
        assert updated.note is None

    def test_missing(self, service):
        with pytest.raises(ValueError, match="not found"):
            service.update_subscription(uuid.uuid4(), SubscriptionUpdate(name="x"), TODAY)


class TestStatisticsAndOptions:
    def test_statistics(self, service):
        subscription = _create(service)
        stats, state = service.get_statistics(subscription.id, TODAY)
        assert stats.accumulated_cost == Decimal("39.96")
        assert stats.days_until_renewal == 25
        assert state == SubscriptionState.ACTIVE

    def test_corrupted_cycle_falls_back(self, service, db_session):
        subscription = Subscription(
            name="Legacy",
            price=Decimal("10"),
            cycle_kind="BIWEEKLY",
            cycle_duration=0,
            start_date=date(2024, 1, 15),
            next_renewal_date=date(2024, 5, 15),
        )
        db_session.add(subscription)
        db_session.commit()

        record = to_record(subscription)
        assert record.cycle_kind == CycleKind.MONTHLY
        assert record.cycle_duration == 1
        stats, _ = service.get_statistics(subscription.id, TODAY)
        assert stats.completed_cycle_count == 4

    def test_renewal_options(self, service):
        subscription = _create(service, cycle_kind=CycleKind.QUARTERLY, price=Decimal("29.99"))
        options = service.get_renewal_options(subscription.id, date(2024, 6, 1))
        assert [o.cycle_count for o in options] == [1, 2, 4]
        assert options[-1].new_renewal_date == date(2025, 6, 1)

    def test_renewal_options_for_one_time(self, service):
        subscription = _create(service, is_one_time=True)
        with pytest.raises(ValueError, match="One-time"):
            service.get_renewal_options(subscription.id, TODAY)

    def test_global_statistics(self, service):
        _create(service)
        _create(
            service,
            name="Laptop",
            price=Decimal("300"),
            start_date=date(2024, 3, 21),
            is_one_time=True,
        )
        stats = service.get_global_statistics(TODAY)
        assert stats.total_subscriptions == 2
        assert stats.one_time_purchase_daily_value == Decimal("10")
        assert stats.total_cost == Decimal("339.96")


class TestRenew:
    def test_advances_from_today(self, service):
        subscription = _create(service)
        renewed = service.renew(subscription.id, 3, TODAY)
        assert renewed.next_renewal_date == date(2024, 7, 20)

    def test_paused(self, service):
        subscription = _create(service)
        service.pause(subscription.id)
        with pytest.raises(ValueError, match="paused"):
            service.renew(subscription.id, 1, TODAY)

    def test_one_time(self, service):
        subscription = _create(service, is_one_time=True)
        with pytest.raises(ValueError, match="One-time"):
            service.renew(subscription.id, 1, TODAY)

    def test_invalid_count(self, service):
        subscription = _create(service)
        with pytest.raises(ValueError, match="at least 1"):
            service.renew(subscription.id, 0, TODAY)

    def test_missing(self, service):
        with pytest.raises(ValueError, match="not found"):
            service.renew(uuid.uuid4(), 1, TODAY)


class TestAutoRenewal:
    def test_toggle_off(self, service):
        subscription = _create(service)
        updated = service.toggle_auto_renewal(subscription.id, TODAY)
        assert updated.auto_renewal is False

    def test_enabling_reanchors_overdue_date(self, service, db_session):
        subscription = _create(service, auto_renewal=False)
        SubscriptionRepository(db_session).update_renewal_date(subscription.id, date(2024, 3, 15))
        updated = service.toggle_auto_renewal(subscription.id, TODAY)
        assert updated.auto_renewal is True
        assert updated.next_renewal_date == date(2024, 5, 15)

    def test_enabling_leaves_inactive_date_alone(self, service, db_session):
        repo = SubscriptionRepository(db_session)
        subscription = _create(service, auto_renewal=False)
        repo.update(subscription.id, {"is_active": False})
        repo.update_renewal_date(subscription.id, date(2024, 3, 15))
        updated = service.toggle_auto_renewal(subscription.id, TODAY)
        assert updated.auto_renewal is True
        assert updated.next_renewal_date == date(2024, 3, 15)
        assert service.refresh_auto_renewals(TODAY) == 0

    def test_refresh_only_touches_eligible(self, service, db_session):
        repo = SubscriptionRepository(db_session)
        auto = _create(service, name="Auto")
        manual = _create(service, name="Manual", auto_renewal=False)
        paused = _create(service, name="Paused")
        current = _create(service, name="Current")
        for subscription in (auto, manual, paused):
            repo.update_renewal_date(subscription.id, date(2024, 3, 15))
        service.pause(paused.id)

        assert service.refresh_auto_renewals(TODAY) == 1

        assert repo.get_by_id(auto.id).next_renewal_date == date(2024, 5, 15)
        assert repo.get_by_id(manual.id).next_renewal_date == date(2024, 3, 15)
        assert repo.get_by_id(paused.id).next_renewal_date == date(2024, 3, 15)
        assert repo.get_by_id(current.id).next_renewal_date == date(2024, 5, 15)


class TestPauseResume:
    def test_pause_and_resume(self, service):
        subscription = _create(service)
        assert service.pause(subscription.id).is_paused is True
        assert service.resume(subscription.id).is_paused is False

    def test_double_pause(self, service):
        subscription = _create(service)
        service.pause(subscription.id)
        with pytest.raises(ValueError, match="already paused"):
            service.pause(subscription.id)

    def test_resume_unpaused(self, service):
        subscription = _create(service)
        with pytest.raises(ValueError, match="not paused"):
            service.resume(subscription.id)


class TestDelete:
    def test_delete(self, service, db_session):
        subscription = _create(service)
        service.delete_subscription(subscription.id)
        assert SubscriptionRepository(db_session).get_by_id(subscription.id) is None

    def test_delete_missing(self, service):
        with pytest.raises(ValueError, match="not found"):
            service.delete_subscription(uuid.uuid4())
