from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskcal.dependencies import get_db, get_current_user
from taskcal.schemas.task import Task as TaskSchema, TaskCreate, TaskEnvelope, TaskUpdate
from taskcal.schemas.user import TokenData
from taskcal.services import tasks as task_service
from taskcal.services.calendar import sort_for_display

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("", response_model=list[TaskSchema])
async def list_tasks(
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    tasks = await task_service.list_tasks_for(db, current_user)
    return sort_for_display(tasks)

@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    task = await task_service.create_task(db, task_data, current_user.id)
    return {"message": "Task created successfully", "task": task}

@router.put("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: int,
    update_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    task = await task_service.update_task(db, current_user, task_id, update_data)
    return {"message": "Task updated successfully", "task": task}

@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    await task_service.delete_task(db, current_user, task_id)
    return {"message": "Task deleted successfully"}
