from pydantic import BaseModel
from taskcal.schemas.task import Task


class CalendarDay(BaseModel):
    year: int
    month: int  # zero-based
    day: int
    date: str
    is_today: bool
    tasks: list[Task] = []


class MonthView(BaseModel):
    year: int
    month: int  # zero-based
    weeks: list[list[CalendarDay | None]]
