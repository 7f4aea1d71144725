# api/post_controller.py
from typing import Annotated
import uuid

from fastapi import APIRouter, Body, Query, status

from core.deps import DbSession, RuntimeDep
import schemas.comments as comments
import schemas.posts as posts
from schemas.responses import PaginatedResponse, SuccessResponse
from services import post_service

posts_router = APIRouter(prefix="/posts", tags=["Posts"])


@posts_router.get(
    "",
    response_model=PaginatedResponse[posts.PostOut],
    summary="List posts",
    description="Paginated list of posts, newest publications first, with optional type/category filters.",
    response_model_exclude_none=True,
)
async def get_posts(
    db: DbSession,
    page: int = Query(1, ge=1, description="Page number starting from 1"),
    limit: int = Query(10, ge=1, le=100, description="Page size (1..100)"),
    type_id: uuid.UUID | None = Query(None, description="Only posts of this content type"),
    category_id: uuid.UUID | None = Query(None, description="Only posts in this category"),
    published_only: bool = Query(False, description="Hide drafts and scheduled posts"),
) -> PaginatedResponse[posts.PostOut]:
    query = posts.PostQuery(type_id=type_id, category_id=category_id, published_only=published_only)
    return await post_service.get_posts(db=db, page=page, limit=limit, query=query)


@posts_router.get(
    "/{post_id}",
    response_model=SuccessResponse[posts.PostOut],
    summary="Get post by ID",
    description="Fetch a single post; served from the model cache when available.",
    response_model_exclude_none=True,
)
async def get_post(post_id: uuid.UUID, db: DbSession, runtime: RuntimeDep) -> SuccessResponse[posts.PostOut]:
    return await post_service.get_post_by_id(db=db, post_id=post_id, runtime=runtime)


@posts_router.post(
    "",
    response_model=SuccessResponse[posts.PostOut],
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="Create a post. The slug is generated from the title when omitted and must be unique per type.",
    response_model_exclude_none=True,
)
async def create_post(
    db: DbSession,
    runtime: RuntimeDep,
    post_data: Annotated[posts.PostCreate, Body(...)],
) -> SuccessResponse[posts.PostOut]:
    return await post_service.create_post(db=db, post_data=post_data, runtime=runtime)


@posts_router.patch(
    "/{post_id}",
    response_model=SuccessResponse[posts.PostOut],
    summary="Update post",
    description="Partially update a post; only provided fields change.",
    response_model_exclude_none=True,
)
async def update_post(
    post_id: uuid.UUID,
    db: DbSession,
    runtime: RuntimeDep,
    payload: Annotated[posts.PostUpdate, Body(...)],
) -> SuccessResponse[posts.PostOut]:
    return await post_service.update_post(db=db, post_id=post_id, payload=payload, runtime=runtime)


@posts_router.post(
    "/{post_id}/publish",
    response_model=SuccessResponse[posts.PostOut],
    summary="Publish post",
    response_model_exclude_none=True,
)
async def publish_post(post_id: uuid.UUID, db: DbSession, runtime: RuntimeDep) -> SuccessResponse[posts.PostOut]:
    return await post_service.set_published(db=db, post_id=post_id, published=True, runtime=runtime)


@posts_router.post(
    "/{post_id}/unpublish",
    response_model=SuccessResponse[posts.PostOut],
    summary="Unpublish post",
    response_model_exclude_none=True,
)
async def unpublish_post(post_id: uuid.UUID, db: DbSession, runtime: RuntimeDep) -> SuccessResponse[posts.PostOut]:
    return await post_service.set_published(db=db, post_id=post_id, published=False, runtime=runtime)


@posts_router.delete(
    "/{post_id}",
    response_model=SuccessResponse[str],
    summary="Delete post",
    description="Delete a post by ID. Returns a confirmation message.",
)
async def delete_post(post_id: uuid.UUID, db: DbSession, runtime: RuntimeDep) -> SuccessResponse[str]:
    return await post_service.delete_post(db=db, post_id=post_id, runtime=runtime)


@posts_router.get(
    "/{post_id}/comments",
    response_model=SuccessResponse[list[comments.CommentOut]],
    summary="List comments",
)
async def get_comments(post_id: uuid.UUID, db: DbSession) -> SuccessResponse[list[comments.CommentOut]]:
    return await post_service.get_comments(db=db, post_id=post_id)


@posts_router.post(
    "/{post_id}/comments",
    response_model=SuccessResponse[comments.CommentOut],
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
    description="Add a comment and refresh the post's comment count.",
)
async def add_comment(
    post_id: uuid.UUID,
    db: DbSession,
    runtime: RuntimeDep,
    payload: Annotated[comments.CommentCreate, Body(...)],
) -> SuccessResponse[comments.CommentOut]:
    return await post_service.add_comment(db=db, post_id=post_id, payload=payload, runtime=runtime)
