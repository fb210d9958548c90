import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from taskcal.models.share import SharedCalendar
from taskcal.models.task import Task
from taskcal.schemas.share import ShareCreate
from taskcal.services.calendar import sort_for_display
from taskcal.services.email_worker import enqueue_email

logger = logging.getLogger(__name__)


def build_summary(sender_username: str, message: str | None, tasks: list) -> tuple[str, str]:
    subject = f"Schedule shared by {sender_username}"
    lines = [
        "Hello,",
        "",
        f"{sender_username} has shared their schedule with you.",
    ]
    if message:
        lines.append(f"Message: {message}")
    lines += ["", f"Total tasks: {len(tasks)}"]
    for task in sort_for_display(tasks):
        when = f"{task.date} {task.time}" if task.time else f"{task.date}"
        lines.append(f"  - {when}  {task.title} [{task.priority}, {task.status}]")
    return subject, "\n".join(lines)


async def share(db: AsyncSession, sender, data: ShareCreate) -> SharedCalendar:
    """
    Record that ``sender`` shared their schedule with ``data.email``.

    The record is committed first and is the source of truth. The summary
    email goes through the outbox; a failure there is logged only.
    """
    record = SharedCalendar(
        from_user_id=sender.id,
        to_email=str(data.email),
        message=data.message,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)

    try:
        result = await db.execute(select(Task).filter(Task.owner_id == sender.id))
        subject, body = build_summary(sender.username, data.message, result.scalars().all())
        await enqueue_email(subject, body, to_email=record.to_email)
    except Exception:
        logger.exception("Share %s recorded but summary email could not be queued", record.id)

    return record


async def list_shares(db: AsyncSession, user_id: int) -> list[SharedCalendar]:
    result = await db.execute(
        select(SharedCalendar)
        .filter(SharedCalendar.from_user_id == user_id)
        .order_by(SharedCalendar.id)
    )
    return result.scalars().all()
