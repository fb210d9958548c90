from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskcal.dependencies import get_db, get_current_user
from taskcal.schemas.share import ShareCreate, ShareCreated, ShareResponse
from taskcal.schemas.user import TokenData
from taskcal.services import sharing as share_service

router = APIRouter(tags=["share"])

@router.post("/share", response_model=ShareCreated)
async def share_calendar(
    data: ShareCreate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    record = await share_service.share(db, current_user, data)
    return {"message": "Calendar shared successfully", "shareId": record.id}

@router.get("/shared", response_model=list[ShareResponse])
async def list_shared(
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    return await share_service.list_shares(db, current_user.id)
