from datetime import datetime
import uuid

from pydantic import BaseModel, Field

from .taxonomy import SLUG_PATTERN


class PostTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128, description="Display name")
    slug: str | None = Field(None, max_length=128, pattern=SLUG_PATTERN)
    description: str | None = Field(None, max_length=255)
    route: str | None = Field(None, max_length=255)
    view: str | None = Field(None, max_length=255)


class PostTypeOut(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    route: str | None = None
    view: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
