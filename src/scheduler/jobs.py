"""
Background job definitions using APScheduler.

Jobs:
- commission_refresh: recompute today's stored commission from ad data
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.config import settings
from src.db import get_db_context
from src.services.commission_cache import refresh_commission
from src.utils.dates import business_today

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler(timezone=settings.timezone)


async def commission_refresh_job():
    """Replace today's stored commission records."""
    day = business_today()
    logger.debug(f"Running commission refresh job for {day}")
    try:
        async with get_db_context() as db:
            records = await refresh_commission(db, day)
        logger.info(f"Commission refresh job: {len(records)} records for {day}")
    except Exception:
        # The next run recomputes from scratch
        logger.exception(f"Commission refresh job failed for {day}")


def setup_scheduler() -> bool:
    """
    Register jobs. Returns False when the refresh interval is 0.

    Called during application startup.
    """
    if settings.commission_refresh_minutes <= 0:
        logger.info("Commission refresh job disabled")
        return False

    scheduler.add_job(
        commission_refresh_job,
        trigger=IntervalTrigger(minutes=settings.commission_refresh_minutes),
        id="commission_refresh",
        name="Recompute today's commission",
        replace_existing=True,
    )

    logger.info(
        f"Scheduler configured: commission refresh every "
        f"{settings.commission_refresh_minutes} min"
    )
    return True
