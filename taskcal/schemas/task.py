from datetime import date as calendar_date, datetime

from pydantic import BaseModel, Field, field_validator
from taskcal.models.task import Priority, TaskStatus
from taskcal.utils.sanitization import sanitize_string, sanitize_optional

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# ── Common base for readable/writeable fields ──
class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    date: calendar_date
    time: str | None = Field(None, pattern=TIME_PATTERN)
    priority: Priority
    status: TaskStatus

    @field_validator("title", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("description", "time", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return sanitize_optional(v)


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    """Partial update: only the fields present in the request body are applied."""
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    date: calendar_date | None = None
    time: str | None = Field(None, pattern=TIME_PATTERN)
    priority: Priority | None = None
    status: TaskStatus | None = None

    @field_validator("title", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("description", "time", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return sanitize_optional(v)

    @field_validator("title", "date", "priority", "status")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field may be omitted but not null")
        return v


class Task(TaskBase):
    id: int
    owner_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class TaskEnvelope(BaseModel):
    message: str
    task: Task
