from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from taskcal.dependencies import get_db, get_current_user
from taskcal.schemas.user import AuthResponse, LoginRequest, Token, TokenData, UserCreate, UserResponse
from taskcal.services import users as user_service
from taskcal.utils.security import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=AuthResponse)
async def register(user: UserCreate, db: AsyncSession = Depends(get_db)):
    new_user = await user_service.register(db, user)
    return {
        "message": "User registered successfully",
        "token": create_access_token(new_user),
        "user": new_user,
    }

@router.post("/login", response_model=AuthResponse)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.authenticate(db, credentials.username, credentials.password)
    return {
        "message": "Login successful",
        "token": create_access_token(user),
        "user": user,
    }

@router.post("/token", response_model=Token)
async def login_for_access_token(
    db: AsyncSession = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
):
    user = await user_service.authenticate(db, form_data.username, form_data.password)
    return {"access_token": create_access_token(user), "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
async def get_me(
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user)
):
    return await user_service.get_user(db, current_user.id)
