from typing import Annotated
import uuid

from fastapi import APIRouter, Body, status

from core.deps import DbSession
import schemas.post_types as post_types
import schemas.posts as posts
from schemas.responses import SuccessResponse
from services import post_service, post_type_service

post_types_router = APIRouter(prefix="/post-types", tags=["Post types"])


@post_types_router.get("", response_model=SuccessResponse[list[post_types.PostTypeOut]], summary="List post types")
async def get_post_types(db: DbSession) -> SuccessResponse[list[post_types.PostTypeOut]]:
    return await post_type_service.get_post_types(db)


@post_types_router.post(
    "",
    response_model=SuccessResponse[post_types.PostTypeOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create post type",
)
async def create_post_type(
    db: DbSession, payload: Annotated[post_types.PostTypeCreate, Body(...)]
) -> SuccessResponse[post_types.PostTypeOut]:
    return await post_type_service.create_post_type(db, payload)


@post_types_router.get("/{type_id}", response_model=SuccessResponse[post_types.PostTypeOut], summary="Get post type")
async def get_post_type(type_id: uuid.UUID, db: DbSession) -> SuccessResponse[post_types.PostTypeOut]:
    return await post_type_service.get_post_type(db, type_id)


@post_types_router.get(
    "/{type_id}/posts/{slug}",
    response_model=SuccessResponse[posts.PostOut],
    summary="Get post by slug",
    description="Resolve a post by its content type and slug.",
    response_model_exclude_none=True,
)
async def get_post_by_slug(type_id: uuid.UUID, slug: str, db: DbSession) -> SuccessResponse[posts.PostOut]:
    return await post_service.get_post_by_slug(db, type_id, slug)
