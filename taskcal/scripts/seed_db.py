"""
Sample data for local development.

Creates the tables, a default admin (admin / admin123 unless
DEFAULT_ADMIN_PASSWORD is set), two sample users and a handful of
Faker-generated tasks around today, plus one sample share record.

Usage: python -m taskcal.scripts.seed_db
"""
import asyncio
import logging
import random
from datetime import date, timedelta

from faker import Faker
from sqlalchemy.future import select

from taskcal.config import settings
from taskcal.database import AsyncSessionLocal, create_tables
from taskcal.logging_setup import setup_logging
from taskcal.models import Priority, SharedCalendar, Task, TaskStatus, User
from taskcal.models.user import Role
from taskcal.services.users import ensure_default_admin
from taskcal.utils.security import get_password_hash

logger = logging.getLogger("taskcal.scripts.seed_db")

fake = Faker()

SAMPLE_USERS = [
    ("user1", "user1@example.com"),
    ("user2", "user2@example.com"),
]
SAMPLE_PASSWORD = "password123"
TIME_SLOTS = ["08:30", "09:00", "10:00", "11:30", "14:00", "16:00", None]


async def _get_or_create_user(db, username: str, email: str) -> User:
    result = await db.execute(select(User).filter(User.username == username))
    user = result.scalars().first()
    if user:
        logger.info("Sample user %s already exists", username)
        return user

    user = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(SAMPLE_PASSWORD),
        role=Role.USER.value,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Sample user %s created", username)
    return user


def _sample_tasks(owner_id: int, count: int) -> list[Task]:
    today = date.today()
    tasks = []
    for _ in range(count):
        tasks.append(Task(
            owner_id=owner_id,
            title=fake.sentence(nb_words=4).rstrip("."),
            description=fake.paragraph(nb_sentences=2),
            date=today + timedelta(days=random.randint(-3, 14)),
            time=random.choice(TIME_SLOTS),
            priority=random.choice(list(Priority)).value,
            status=random.choice(list(TaskStatus)).value,
        ))
    return tasks


async def seed():
    await create_tables()

    async with AsyncSessionLocal() as db:
        await ensure_default_admin(
            db,
            settings.DEFAULT_ADMIN_USERNAME,
            settings.DEFAULT_ADMIN_EMAIL,
            settings.DEFAULT_ADMIN_PASSWORD or "admin123",
        )

        users = [await _get_or_create_user(db, u, e) for u, e in SAMPLE_USERS]

        for user in users:
            db.add_all(_sample_tasks(user.id, random.randint(3, 6)))
        db.add(SharedCalendar(
            from_user_id=users[0].id,
            to_email=fake.email(),
            message="Sharing this week's schedule",
        ))
        await db.commit()

    logger.info("Database seeded. Sample accounts: user1 / user2 with password %r", SAMPLE_PASSWORD)


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL, None)
    asyncio.run(seed())
