import logging
from typing import Any

from arq import cron
from arq.connections import RedisSettings

from subtrack.core.clock import get_today
from subtrack.core.config import settings
from subtrack.core.database import SessionLocal
from subtrack.services.subscription_tracker import SubscriptionTrackerService

logger = logging.getLogger(__name__)

redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)


async def refresh_auto_renewals_task(ctx: dict[str, Any]) -> int:
    """Background task: re-anchor overdue auto-renewing subscriptions.

    Runs daily so an auto-renewing subscription whose renewal date has passed
    moves to its next renewal after today without user action.
    """
    db = SessionLocal()
    try:
        service = SubscriptionTrackerService(db)
        count = service.refresh_auto_renewals(get_today())
        if count > 0:
            logger.info("Auto-renewed %d subscriptions", count)
        return count
    finally:
        db.close()


class WorkerSettings:
    functions = [
        refresh_auto_renewals_task,
    ]
    cron_jobs = [
        cron(refresh_auto_renewals_task, hour=settings.AUTO_RENEWAL_SWEEP_HOUR, minute=0),
    ]
    redis_settings = redis_settings
