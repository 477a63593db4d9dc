"""
Sync scheduler.

Runs the cold start once, then a recurring interval job driving scheduled
passes.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from helpnet.services.sync.synchronizer import Synchronizer
from jobs.health import set_scheduler
from jobs.tasks.blockchain_sync_task import run_sync_pass

SYNC_JOB_ID = "blockchain_sync"

# Global scheduler reference for shutdown
scheduler_instance: AsyncIOScheduler | None = None


def create_scheduler(
    synchronizer: Synchronizer, interval_seconds: int
) -> AsyncIOScheduler:
    """
    Create scheduler with the recurring sync job.

    Args:
        synchronizer: Process-wide synchronizer
        interval_seconds: Seconds between passes

    Returns:
        Configured (not started) scheduler
    """
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_sync_pass,
        "interval",
        seconds=interval_seconds,
        args=[synchronizer],
        id=SYNC_JOB_ID,
        name="Blockchain event sync",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


async def start_sync_loop(
    synchronizer: Synchronizer, interval_seconds: int
) -> AsyncIOScheduler:
    """
    Cold start, then start the recurring timer.

    A failed cold start is logged; the next tick retries it.

    Args:
        synchronizer: Process-wide synchronizer
        interval_seconds: Seconds between passes

    Returns:
        Running scheduler
    """
    global scheduler_instance

    try:
        await synchronizer.cold_start()
    except Exception as e:
        logger.exception(f"[Scheduler] Cold start failed, will retry on next tick: {e}")

    scheduler = create_scheduler(synchronizer, interval_seconds)
    scheduler.start()
    scheduler_instance = scheduler
    set_scheduler(scheduler)

    logger.info(f"[Scheduler] Polling every {interval_seconds}s")
    return scheduler
