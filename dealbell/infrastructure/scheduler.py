"""
APScheduler setup for polling the closed-won channel on an interval.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from dealbell.config.settings import get_settings

logger = logging.getLogger(__name__)

POLL_JOB_ID = "closed_won_poll"

# Global scheduler instance
scheduler: Optional[AsyncIOScheduler] = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the scheduler instance."""
    global scheduler

    if scheduler is None:
        scheduler = AsyncIOScheduler(timezone="UTC")

    return scheduler


async def start_scheduler() -> None:
    """Start the scheduler and register the poll job when polling is enabled."""
    settings = get_settings()
    if settings.poll_interval_seconds <= 0:
        logger.info("Polling disabled")
        return

    sched = get_scheduler()
    sched.add_job(
        poll_closed_won,
        trigger=IntervalTrigger(seconds=settings.poll_interval_seconds),
        id=POLL_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    if not sched.running:
        sched.start()
        logger.info(f"Scheduler started, polling every {settings.poll_interval_seconds}s")


async def stop_scheduler() -> None:
    """Stop the scheduler gracefully."""
    global scheduler
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler stopped")
    scheduler = None


async def poll_closed_won() -> None:
    """
    Run the pipeline once.

    This function is called by the scheduler on every interval.
    """
    from dealbell.usecases.closed_won_pipeline import build_pipeline

    try:
        pipeline = build_pipeline(get_settings())
        outcome = await pipeline.run({"source": "scheduler"})
        logger.info(f"Poll finished: {outcome.state.value}")
    except Exception as e:
        logger.exception(f"Error polling closed-won channel: {e}")
