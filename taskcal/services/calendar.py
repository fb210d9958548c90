"""
Calendar indexing over an already-fetched task collection.

Months are zero-based (January == 0) everywhere in this module, matching the
client's Date API; the calendar key itself is the 1-based ``YYYY-MM-DD``
string stored on each task. Weeks start on Sunday.
"""
import calendar
from datetime import date

from taskcal.schemas.calendar import CalendarDay, MonthView

NO_TIME = "00:00"


def date_key(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month + 1:02d}-{day:02d}"


def task_date_key(task) -> str:
    value = task.date
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def tasks_on_date(tasks, year: int, month: int, day: int) -> list:
    key = date_key(year, month, day)
    return [t for t in tasks if task_date_key(t) == key]


def month_grid(year: int, month: int) -> list[list[int | None]]:
    """
    Week rows of day numbers for the month, leading blanks as ``None``.

    The last row stops at the last day of the month and is not padded.
    """
    first_weekday, days_in_month = calendar.monthrange(year, month + 1)
    leading = (first_weekday + 1) % 7  # Monday=0 -> Sunday=0

    cells: list[int | None] = [None] * leading + list(range(1, days_in_month + 1))
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]


def sort_for_display(tasks) -> list:
    # sorted() is stable, so equal (date, time) keys keep their input order
    return sorted(tasks, key=lambda t: (task_date_key(t), t.time or NO_TIME))


def is_today(year: int, month: int, day: int, as_of: date) -> bool:
    return (year, month, day) == (as_of.year, as_of.month - 1, as_of.day)


def build_month_view(tasks, year: int, month: int, as_of: date) -> MonthView:
    weeks = []
    for row in month_grid(year, month):
        week = []
        for day in row:
            if day is None:
                week.append(None)
                continue
            week.append(CalendarDay(
                year=year,
                month=month,
                day=day,
                date=date_key(year, month, day),
                is_today=is_today(year, month, day, as_of),
                tasks=tasks_on_date(tasks, year, month, day),
            ))
        weeks.append(week)
    return MonthView(year=year, month=month, weeks=weeks)
