from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator
from taskcal.models.user import Role
from taskcal.utils.sanitization import sanitize_string


class UserBase(BaseModel):
    username: str
    email: EmailStr

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class UserCreate(UserBase):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Identity carried by a verified access token."""
    id: int
    username: str
    role: Role


class UserResponse(UserBase):
    id: int
    role: Role
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class RoleUpdate(BaseModel):
    role: Role


class UserRoleResponse(BaseModel):
    message: str
    user: UserResponse


class AdminStats(BaseModel):
    totalUsers: int
    totalTasks: int
    totalShares: int
