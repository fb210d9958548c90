from taskcal.models.user import User, Role
from taskcal.models.task import Task, Priority, TaskStatus
from taskcal.models.share import SharedCalendar
from taskcal.models.email import EmailLog, EmailStatus

# Import all models here so Base.metadata knows every table
__all__ = ["User", "Role", "Task", "Priority", "TaskStatus", "SharedCalendar", "EmailLog", "EmailStatus"]
