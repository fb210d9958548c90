from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskcal.dependencies import get_db, get_current_user
from taskcal.schemas.calendar import MonthView
from taskcal.schemas.task import Task as TaskSchema
from taskcal.schemas.user import TokenData
from taskcal.services import tasks as task_service
from taskcal.services.calendar import build_month_view

router = APIRouter(prefix="/calendar", tags=["calendar"])

@router.get("", response_model=MonthView)
async def month_view(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=0, le=11, description="Zero-based month (January = 0)"),
    as_of: date | None = Query(None, description="Date treated as today; defaults to the server's local date"),
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    tasks = await task_service.list_tasks_for(db, current_user)
    tasks = [TaskSchema.model_validate(t) for t in tasks]
    return build_month_view(tasks, year, month, as_of or date.today())
