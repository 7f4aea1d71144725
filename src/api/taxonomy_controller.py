from typing import Annotated

from fastapi import APIRouter, Body, status

from core.deps import DbSession
import schemas.taxonomy as taxonomy
from schemas.responses import SuccessResponse
from services import taxonomy_service

categories_router = APIRouter(prefix="/categories", tags=["Categories"])
media_router = APIRouter(prefix="/media", tags=["Media"])


@categories_router.get("", response_model=SuccessResponse[list[taxonomy.CategoryOut]], summary="List categories")
async def get_categories(db: DbSession) -> SuccessResponse[list[taxonomy.CategoryOut]]:
    return await taxonomy_service.get_categories(db)


@categories_router.post(
    "",
    response_model=SuccessResponse[taxonomy.CategoryOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
async def create_category(
    db: DbSession, payload: Annotated[taxonomy.CategoryCreate, Body(...)]
) -> SuccessResponse[taxonomy.CategoryOut]:
    return await taxonomy_service.create_category(db, payload)


@media_router.get("", response_model=SuccessResponse[list[taxonomy.MediaOut]], summary="List media")
async def get_media(db: DbSession) -> SuccessResponse[list[taxonomy.MediaOut]]:
    return await taxonomy_service.get_media(db)


@media_router.post(
    "",
    response_model=SuccessResponse[taxonomy.MediaOut],
    status_code=status.HTTP_201_CREATED,
    summary="Register media",
    description="Register metadata for an uploaded file so it can be attached to posts.",
)
async def create_media(db: DbSession, payload: Annotated[taxonomy.MediaCreate, Body(...)]) -> SuccessResponse[taxonomy.MediaOut]:
    return await taxonomy_service.create_media(db, payload)
