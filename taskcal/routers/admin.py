from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskcal.dependencies import get_db, require_admin
from taskcal.schemas.user import AdminStats, RoleUpdate, TokenData, UserResponse, UserRoleResponse
from taskcal.services import users as user_service

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/users", response_model=list[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db),
    admin: TokenData = Depends(require_admin)
):
    return await user_service.list_users(db)

@router.put("/users/{user_id}/role", response_model=UserRoleResponse)
async def change_role(
    user_id: int,
    data: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: TokenData = Depends(require_admin)
):
    user = await user_service.change_role(db, admin, user_id, data.role)
    return {"message": "User role updated successfully", "user": user}

@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: TokenData = Depends(require_admin)
):
    await user_service.delete_user(db, admin, user_id)
    return {"message": "User deleted successfully"}

@router.get("/stats", response_model=AdminStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    admin: TokenData = Depends(require_admin)
):
    return await user_service.stats(db)
