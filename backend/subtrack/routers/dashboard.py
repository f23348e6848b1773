from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from subtrack.core.clock import get_today
from subtrack.core.database import get_db
from subtrack.schemas.statistics import GlobalStatisticsResponse
from subtrack.services.subscription_tracker import SubscriptionTrackerService

router = APIRouter()


@router.get(
    "/stats",
    response_model=GlobalStatisticsResponse,
    summary="Get dashboard statistics",
)
async def get_stats(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
) -> GlobalStatisticsResponse:
    """Daily/monthly spend, status counts and one-time purchase amortization."""
    stats = SubscriptionTrackerService(db).get_global_statistics(today)
    return GlobalStatisticsResponse.model_validate(stats)
