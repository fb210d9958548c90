import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import TypedDict

from sqlalchemy import update
from sqlalchemy.future import select

from taskcal.config import settings
from taskcal.database import AsyncSessionLocal
from taskcal.models.email import EmailLog, EmailStatus
from taskcal.utils.email import send_email_async

logger = logging.getLogger(__name__)


class EmailJob(TypedDict):
    log_id: int
    subject: str
    body: str
    to_email: str

# Process-local queue; the email_logs table is the durable outbox
email_queue: asyncio.Queue[EmailJob] = asyncio.Queue()


async def _claim(log_id: int) -> bool:
    """Move a row from pending to sending; False if another consumer got it first."""
    async with AsyncSessionLocal() as db:
        result = await db.execute(
            update(EmailLog)
            .where(EmailLog.id == log_id, EmailLog.status == EmailStatus.PENDING.value)
            .values(status=EmailStatus.SENDING.value, attempts=EmailLog.attempts + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount == 1


async def _finish(log_id: int, status: EmailStatus, error: str | None = None):
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(EmailLog).filter(EmailLog.id == log_id))
        log_entry = result.scalars().first()
        if not log_entry:
            return
        if status == EmailStatus.FAILED and log_entry.attempts < settings.EMAIL_MAX_ATTEMPTS:
            # Leave it for the outbox sweep to pick up again
            status = EmailStatus.PENDING
        log_entry.status = status.value
        log_entry.error_message = error
        if status in (EmailStatus.SENT, EmailStatus.SKIPPED):
            log_entry.sent_at = datetime.now(timezone.utc)
        await db.commit()


async def process_job(job: EmailJob) -> None:
    log_id = job["log_id"]
    if not await _claim(log_id):
        logger.debug("[WORKER] Email %s already claimed, skipping", log_id)
        return

    try:
        sent = await send_email_async(job["subject"], job["body"], job["to_email"])
    except Exception as e:
        logger.error("[WORKER ERROR] Failed to deliver email %s: %s", log_id, e)
        await _finish(log_id, EmailStatus.FAILED, str(e))
        return

    await _finish(log_id, EmailStatus.SENT if sent else EmailStatus.SKIPPED)


async def email_worker():
    """
    Background worker that pulls jobs from the email_queue and sends them.
    Runs until the application shuts down and cancels it.
    """
    logger.info("[WORKER] Background email worker started.")
    while True:
        job = await email_queue.get()
        try:
            await process_job(job)
        except Exception:
            # Keep draining; the row stays in the outbox for the sweep
            logger.exception("[WORKER ERROR] Unexpected error for email %s", job.get("log_id"))
        finally:
            email_queue.task_done()


async def enqueue_email(subject: str, body: str, to_email: str) -> int:
    """
    Public API to add an email job to the outbox table and background queue.
    """
    # 1. Save to DB
    async with AsyncSessionLocal() as db:
        new_log = EmailLog(subject=subject, body=body, to_email=to_email, status=EmailStatus.PENDING.value)
        db.add(new_log)
        await db.commit()
        await db.refresh(new_log)
        log_id = new_log.id

    # 2. Add to queue for immediate processing
    await email_queue.put({
        "log_id": log_id,
        "subject": subject,
        "body": body,
        "to_email": to_email
    })
    logger.info("[QUEUE] Enqueued email (DB ID: %s): %s...", log_id, subject[:30])
    return log_id


async def requeue_pending_emails(grace: timedelta = timedelta(minutes=1)) -> int:
    """Put outbox rows still pending after ``grace`` back on the queue."""
    cutoff = datetime.now(timezone.utc) - grace
    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(EmailLog)
            .filter(EmailLog.status == EmailStatus.PENDING.value, EmailLog.created_at <= cutoff)
            .order_by(EmailLog.id)
        )
        stranded = result.scalars().all()

    for log_entry in stranded:
        await email_queue.put({
            "log_id": log_entry.id,
            "subject": log_entry.subject,
            "body": log_entry.body,
            "to_email": log_entry.to_email,
        })
    if stranded:
        logger.info("[QUEUE] Re-enqueued %d stranded email(s)", len(stranded))
    return len(stranded)
