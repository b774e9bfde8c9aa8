"""APScheduler setup for background jobs."""

import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sessionauth.config import get_settings

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


def setup_scheduler() -> AsyncIOScheduler:
    """Set up and start the background scheduler."""
    global _scheduler

    settings = get_settings()

    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        "sessionauth.jobs.cleanup:purge_expired_sessions",
        trigger=IntervalTrigger(minutes=settings.session_cleanup_minutes),
        id="session_cleanup",
        name="Expired Session Cleanup",
        replace_existing=True,
    )

    _scheduler.start()
    logger.info("Background scheduler started")

    return _scheduler


def shutdown_scheduler() -> None:
    """Shutdown the scheduler."""
    global _scheduler

    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Background scheduler stopped")


def get_scheduler() -> AsyncIOScheduler | None:
    """Get the current scheduler instance."""
    return _scheduler
