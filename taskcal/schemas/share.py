from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator
from taskcal.utils.sanitization import sanitize_optional


class ShareCreate(BaseModel):
    email: EmailStr
    message: str | None = Field(None, max_length=2000)

    @field_validator("message", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_optional(v)


class ShareResponse(BaseModel):
    id: int
    from_user_id: int
    to_email: str
    message: str | None = None
    shared_at: datetime | None = None

    class Config:
        from_attributes = True


class ShareCreated(BaseModel):
    message: str
    shareId: int
