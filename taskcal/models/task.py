import enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from taskcal.database import Base
from taskcal.models.user import utcnow


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, index=True, nullable=False)
    time = Column(String(5), nullable=True)  # HH:MM wall-clock
    priority = Column(String(20), nullable=False, default=Priority.MEDIUM.value)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)
