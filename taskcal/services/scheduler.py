import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from taskcal.config import settings
from taskcal.services.email_worker import requeue_pending_emails

logger = logging.getLogger(__name__)


async def sweep_outbox():
    logger.debug("[SCHEDULER] Sweeping email outbox...")
    try:
        await requeue_pending_emails()
    except Exception:
        logger.exception("[SCHEDULER] Error during outbox sweep")


def setup_scheduler():
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        sweep_outbox,
        trigger=IntervalTrigger(minutes=settings.OUTBOX_SWEEP_MINUTES),
    )
    scheduler.start()
    return scheduler
