from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from subtrack.core.clock import get_today
from subtrack.core.database import get_db
from subtrack.models.subscription import Subscription
from subtrack.repositories.subscription_repository import SubscriptionRepository
from subtrack.schemas.statistics import RenewalOptionResponse, SubscriptionStatisticsResponse
from subtrack.schemas.subscription import (
    RenewRequest,
    SubscriptionCreate,
    SubscriptionResponse,
    SubscriptionUpdate,
)
from subtrack.services.subscription_tracker import SubscriptionTrackerService

router = APIRouter()


def _get_or_404(db: Session, subscription_id: UUID) -> Subscription:
    subscription = SubscriptionRepository(db).get_by_id(subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.get(
    "/",
    response_model=list[SubscriptionResponse],
    summary="List subscriptions",
)
async def list_subscriptions(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[Subscription]:
    """List subscriptions ordered by upcoming renewal."""
    repo = SubscriptionRepository(db)
    response.headers["X-Total-Count"] = str(repo.count())
    return repo.get_all(skip=skip, limit=limit)


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Get subscription",
    responses={404: {"description": "Subscription not found"}},
)
async def get_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
) -> Subscription:
    """Get a subscription by ID."""
    return _get_or_404(db, subscription_id)


@router.post(
    "/",
    response_model=SubscriptionResponse,
    status_code=201,
    summary="Create subscription",
    responses={422: {"description": "Validation error"}},
)
async def create_subscription(
    data: SubscriptionCreate,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> Subscription:
    """Create a subscription; its next renewal date is computed from the start date."""
    return SubscriptionTrackerService(db).create_subscription(data, today)


@router.patch(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Update subscription",
    responses={
        404: {"description": "Subscription not found"},
        422: {"description": "Validation error"},
    },
)
async def update_subscription(
    subscription_id: UUID,
    data: SubscriptionUpdate,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> Subscription:
    """Update a subscription. Changing the cycle or start date reschedules renewal."""
    _get_or_404(db, subscription_id)
    return SubscriptionTrackerService(db).update_subscription(subscription_id, data, today)


@router.delete(
    "/{subscription_id}",
    status_code=204,
    summary="Delete subscription",
    responses={404: {"description": "Subscription not found"}},
)
async def delete_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    """Delete a subscription."""
    try:
        SubscriptionTrackerService(db).delete_subscription(subscription_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get(
    "/{subscription_id}/statistics",
    response_model=SubscriptionStatisticsResponse,
    summary="Get subscription statistics",
    responses={404: {"description": "Subscription not found"}},
)
async def get_subscription_statistics(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> SubscriptionStatisticsResponse:
    """Accumulated cost, averages and renewal countdown as of today."""
    _get_or_404(db, subscription_id)
    stats, state = SubscriptionTrackerService(db).get_statistics(subscription_id, today)
    return SubscriptionStatisticsResponse(
        accumulated_cost=stats.accumulated_cost,
        accumulated_duration_label=stats.accumulated_duration_label,
        average_monthly_cost=stats.average_monthly_cost,
        average_daily_cost=stats.average_daily_cost,
        completed_cycle_count=stats.completed_cycle_count,
        days_until_renewal=stats.days_until_renewal,
        is_overdue=stats.is_overdue,
        current_cycle_start=stats.current_cycle_start,
        state=state,
    )


@router.get(
    "/{subscription_id}/renewal_options",
    response_model=list[RenewalOptionResponse],
    summary="List manual renewal options",
    responses={
        400: {"description": "Subscription cannot be renewed"},
        404: {"description": "Subscription not found"},
    },
)
async def get_renewal_options(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> list[RenewalOptionResponse]:
    """Candidate renewal lengths with their total cost and resulting renewal date."""
    _get_or_404(db, subscription_id)
    try:
        options = SubscriptionTrackerService(db).get_renewal_options(subscription_id, today)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return [RenewalOptionResponse.model_validate(option) for option in options]


@router.post(
    "/{subscription_id}/renew",
    response_model=SubscriptionResponse,
    summary="Renew subscription manually",
    responses={
        400: {"description": "Subscription cannot be renewed"},
        404: {"description": "Subscription not found"},
    },
)
async def renew_subscription(
    subscription_id: UUID,
    data: RenewRequest,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> Subscription:
    """Advance the renewal date by the given number of cycles from today."""
    _get_or_404(db, subscription_id)
    try:
        return SubscriptionTrackerService(db).renew(subscription_id, data.cycle_count, today)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post(
    "/{subscription_id}/toggle_auto_renewal",
    response_model=SubscriptionResponse,
    summary="Toggle auto-renewal",
    responses={404: {"description": "Subscription not found"}},
)
async def toggle_auto_renewal(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> Subscription:
    """Enable or disable auto-renewal."""
    _get_or_404(db, subscription_id)
    return SubscriptionTrackerService(db).toggle_auto_renewal(subscription_id, today)


@router.post(
    "/{subscription_id}/pause",
    response_model=SubscriptionResponse,
    summary="Pause subscription",
    responses={
        400: {"description": "Subscription is already paused"},
        404: {"description": "Subscription not found"},
    },
)
async def pause_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
) -> Subscription:
    """Pause a subscription."""
    _get_or_404(db, subscription_id)
    try:
        return SubscriptionTrackerService(db).pause(subscription_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post(
    "/{subscription_id}/resume",
    response_model=SubscriptionResponse,
    summary="Resume subscription",
    responses={
        400: {"description": "Subscription is not paused"},
        404: {"description": "Subscription not found"},
    },
)
async def resume_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
) -> Subscription:
    """Resume a paused subscription."""
    _get_or_404(db, subscription_id)
    try:
        return SubscriptionTrackerService(db).resume(subscription_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
