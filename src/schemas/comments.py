from datetime import datetime
import uuid

from pydantic import BaseModel, EmailStr, Field


class CommentCreate(BaseModel):
    author: str = Field(..., min_length=1, max_length=128)
    email: EmailStr | None = Field(None, description="Optional contact address")
    body: str = Field(..., min_length=1, max_length=10000)


class CommentOut(BaseModel):
    id: uuid.UUID
    post_id: uuid.UUID
    author: str
    body: str
    is_approved: bool
    created_at: datetime

    model_config = {"from_attributes": True}
