from datetime import timedelta

from sqlalchemy.future import select

from taskcal.config import settings
from taskcal.models.email import EmailLog, EmailStatus
from taskcal.services import email_worker
from taskcal.services.email_worker import enqueue_email, process_job, requeue_pending_emails


async def _row(db, log_id):
    db.expire_all()
    result = await db.execute(select(EmailLog).filter(EmailLog.id == log_id))
    return result.scalars().one()


def _job(log_id):
    return {"log_id": log_id, "subject": "s", "body": "b", "to_email": "friend@example.com"}


async def test_sent(db, monkeypatch):
    sent = []

    async def fake_send(subject, body, to_email):
        sent.append(to_email)
        return True

    monkeypatch.setattr(email_worker, "send_email_async", fake_send)
    log_id = await enqueue_email("s", "b", to_email="friend@example.com")

    await process_job(_job(log_id))

    row = await _row(db, log_id)
    assert row.status == EmailStatus.SENT.value
    assert row.attempts == 1
    assert row.sent_at is not None
    assert sent == ["friend@example.com"]


async def test_skipped_without_smtp_config(db):
    log_id = await enqueue_email("s", "b", to_email="friend@example.com")

    await process_job(_job(log_id))

    assert (await _row(db, log_id)).status == EmailStatus.SKIPPED.value


async def test_failure_is_recorded_not_raised(db, monkeypatch):
    async def failing_send(subject, body, to_email):
        raise ConnectionError("connection refused")

    monkeypatch.setattr(email_worker, "send_email_async", failing_send)
    log_id = await enqueue_email("s", "b", to_email="friend@example.com")

    await process_job(_job(log_id))

    row = await _row(db, log_id)
    assert row.status == EmailStatus.FAILED.value
    assert "connection refused" in row.error_message


async def test_retry_hook_returns_row_to_pending(db, monkeypatch):
    async def failing_send(subject, body, to_email):
        raise ConnectionError("try later")

    monkeypatch.setattr(email_worker, "send_email_async", failing_send)
    monkeypatch.setattr(settings, "EMAIL_MAX_ATTEMPTS", 2)
    log_id = await enqueue_email("s", "b", to_email="friend@example.com")

    await process_job(_job(log_id))
    assert (await _row(db, log_id)).status == EmailStatus.PENDING.value

    await process_job(_job(log_id))
    row = await _row(db, log_id)
    assert row.status == EmailStatus.FAILED.value
    assert row.attempts == 2


async def test_claimed_job_is_not_sent_twice(db, monkeypatch):
    calls = []

    async def fake_send(subject, body, to_email):
        calls.append(subject)
        return True

    monkeypatch.setattr(email_worker, "send_email_async", fake_send)
    log_id = await enqueue_email("s", "b", to_email="friend@example.com")

    await process_job(_job(log_id))
    await process_job(_job(log_id))

    assert calls == ["s"]


async def test_requeue_pending(db):
    await enqueue_email("s", "b", to_email="friend@example.com")

    assert await requeue_pending_emails(grace=timedelta(0)) == 1
    assert await requeue_pending_emails(grace=timedelta(hours=1)) == 0
