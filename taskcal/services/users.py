import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from taskcal.errors import DuplicateIdentity, InvalidCredentials, NotFound
from taskcal.models.share import SharedCalendar
from taskcal.models.task import Task
from taskcal.models.user import Role, User
from taskcal.schemas.user import UserCreate
from taskcal.services import policy
from taskcal.utils.security import burn_password_check, get_password_hash, verify_password

logger = logging.getLogger(__name__)


async def register(db: AsyncSession, data: UserCreate, role: Role = Role.USER) -> User:
    new_user = User(
        username=data.username,
        email=str(data.email),
        hashed_password=get_password_hash(data.password),
        role=role.value,
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateIdentity("Username or email already exists")
    await db.refresh(new_user)
    logger.info("Registered user %s (id=%s)", new_user.username, new_user.id)
    return new_user


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    result = await db.execute(select(User).filter(User.username == username))
    user = result.scalars().first()

    if user is None:
        burn_password_check(password)
        logger.warning("Failed login for username=%r", username)
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        logger.warning("Failed login for username=%r", username)
        raise InvalidCredentials()
    return user


async def get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).filter(User.id == user_id))
    user = result.scalars().first()
    if not user:
        raise NotFound("User not found")
    return user


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return result.scalars().all()


async def change_role(db: AsyncSession, actor, user_id: int, role: Role) -> User:
    policy.ensure_can_change_role(actor, user_id)
    user = await get_user(db, user_id)

    user.role = role.value
    user.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)
    logger.info("Admin %s set role of user %s to %s", actor.id, user_id, role.value)
    return user


async def delete_user(db: AsyncSession, actor, user_id: int) -> None:
    """
    Delete a user together with their tasks and share records.

    The three deletes run as sequential statements inside one transaction,
    so a failure at any step leaves the user and their data intact.
    """
    policy.ensure_can_delete_user(actor, user_id)
    await get_user(db, user_id)

    try:
        await db.execute(delete(Task).where(Task.owner_id == user_id))
        await db.execute(delete(SharedCalendar).where(SharedCalendar.from_user_id == user_id))
        await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Admin %s deleted user %s", actor.id, user_id)


async def stats(db: AsyncSession) -> dict:
    total_users = (await db.execute(select(func.count(User.id)))).scalar()
    total_tasks = (await db.execute(select(func.count(Task.id)))).scalar()
    total_shares = (await db.execute(select(func.count(SharedCalendar.id)))).scalar()
    return {
        "totalUsers": total_users,
        "totalTasks": total_tasks,
        "totalShares": total_shares,
    }


async def ensure_default_admin(db: AsyncSession, username: str, email: str, password: str) -> User | None:
    """Create the bootstrap admin unless a user with that username or email exists."""
    result = await db.execute(
        select(User).filter((User.username == username) | (User.email == email))
    )
    if result.scalars().first():
        return None

    admin = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        role=Role.ADMIN.value,
    )
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info("Default admin user '%s' created", username)
    return admin
