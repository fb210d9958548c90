import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from taskcal.errors import NotFound
from taskcal.models.task import Task
from taskcal.schemas.task import TaskCreate, TaskUpdate
from taskcal.services import policy

logger = logging.getLogger(__name__)

# Fields a client may change; owner_id is fixed at creation.
UPDATABLE_FIELDS = ("title", "description", "date", "time", "priority", "status")


def _column_value(value):
    return getattr(value, "value", value)


async def create_task(db: AsyncSession, task_data: TaskCreate, owner_id: int) -> Task:
    new_task = Task(
        owner_id=owner_id,
        title=task_data.title,
        description=task_data.description,
        date=task_data.date,
        time=task_data.time,
        priority=task_data.priority.value,
        status=task_data.status.value,
    )
    db.add(new_task)
    await db.commit()
    await db.refresh(new_task)
    return new_task


async def get_task_by_id(db: AsyncSession, task_id: int) -> Task:
    result = await db.execute(select(Task).filter(Task.id == task_id))
    task = result.scalars().first()
    if not task:
        raise NotFound("Task not found")
    return task


async def list_tasks_for(db: AsyncSession, actor) -> list[Task]:
    # Storage order only; callers sort for display.
    result = await db.execute(select(Task).filter(Task.owner_id == actor.id))
    visible = policy.can_view(actor)
    return [t for t in result.scalars().all() if visible(t)]


async def update_task(db: AsyncSession, actor, task_id: int, update_data: TaskUpdate) -> Task:
    # Existence, then permission, then mutation. No lock spans these steps,
    # so two concurrent requests on the same id can interleave.
    task = await get_task_by_id(db, task_id)
    policy.ensure_can_mutate(actor, task)

    changes = update_data.model_dump(exclude_unset=True)
    for key in UPDATABLE_FIELDS:
        if key in changes:
            setattr(task, key, _column_value(changes[key]))
    task.updated_at = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(task)
    if task.owner_id != actor.id:
        logger.info("Admin %s updated task %s owned by user %s", actor.id, task.id, task.owner_id)
    return task


async def delete_task(db: AsyncSession, actor, task_id: int) -> None:
    task = await get_task_by_id(db, task_id)
    policy.ensure_can_mutate(actor, task)

    await db.delete(task)
    await db.commit()
    if task.owner_id != actor.id:
        logger.info("Admin %s deleted task %s owned by user %s", actor.id, task_id, task.owner_id)
