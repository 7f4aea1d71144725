from datetime import datetime
import uuid

from pydantic import BaseModel, Field

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    slug: str | None = Field(None, max_length=64, pattern=SLUG_PATTERN)
    description: str | None = Field(None, max_length=255)


class CategoryOut(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None

    model_config = {"from_attributes": True}


class MediaCreate(BaseModel):
    filename: str = Field(..., min_length=1, max_length=128)
    content_type: str = Field(..., min_length=1, max_length=255)
    size: int = Field(default=0, ge=0)
    alt_text: str | None = Field(None, max_length=128)


class MediaOut(BaseModel):
    id: uuid.UUID
    filename: str
    content_type: str
    size: int
    alt_text: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
