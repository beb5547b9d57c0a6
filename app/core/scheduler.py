from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from app.core.settings import settings
from app.services.history_store import reset_search_history
import asyncio
import logging

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

def start_scheduler() -> bool:
    if not settings.history_reset_cron:
        logger.info("Scheduler disabled: no history reset schedule configured")
        return False

    scheduler.add_job(
        reset_search_history,
        CronTrigger.from_crontab(settings.history_reset_cron),
        id='reset_search_history',
        name=f'Reset search history ({settings.history_reset_cron})',
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"Scheduler started: search history resets on '{settings.history_reset_cron}'")
    return True

async def shutdown_scheduler(max_ticks: int = 10):
    if not scheduler.running:
        return

    scheduler.shutdown(wait=False)
    # newer AsyncIOScheduler releases run the stop on the next loop iteration
    for _ in range(max_ticks):
        if not scheduler.running:
            break
        await asyncio.sleep(0)
    else:
        logger.warning("Scheduler still reports running after shutdown")
        return
    logger.info("Scheduler shutdown")
