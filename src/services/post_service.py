from datetime import UTC, datetime
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError, NotFoundError, ValidationError, ValidationFailure
from core.runtime import Runtime
from db.models.post import Post
import db.repositories.comment_repository as comment_repository
import db.repositories.post_repository as post_repository
import db.repositories.post_type_repository as post_type_repository
import db.repositories.taxonomy_repository as taxonomy_repository
from schemas.comments import CommentCreate, CommentOut
from schemas.posts import PostCreate, PostOut, PostQuery, PostUpdate
from schemas.responses import PaginatedResponse, PaginationMeta, SuccessResponse

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "slug", "keywords", "description", "route", "view", "excerpt", "body")


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


async def _persist(db: AsyncSession, post: Post, runtime: Runtime) -> Post:
    """Save through the repository and commit; roll back on any failure."""
    try:
        await post_repository.save_post(db, post, hooks=runtime.hooks, cache=runtime.cache)
        await db.commit()
    except ValidationFailure:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        # The storage constraint catches slug races the pre-check cannot see
        raise ConflictError("Post conflicts with an existing post of the same type and slug") from e
    except Exception:
        await db.rollback()
        raise
    # A read between the pre-save eviction and the commit may have cached the old row
    runtime.cache.invalidate(Post, post.id)
    return post


def _with_current_status(data: PostOut) -> PostOut:
    """Scheduled posts go live while their snapshot sits in the cache."""
    is_published = data.published is not None and data.published <= _utcnow()
    if is_published == data.is_published:
        return data
    return data.model_copy(update={"is_published": is_published})


async def _require_post(db: AsyncSession, post_id: uuid.UUID) -> Post:
    post = await post_repository.get_post_by_id(db, post_id)
    if not post:
        raise NotFoundError(f"Post with id {post_id} not found")
    return post


async def get_posts(
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    query: PostQuery | None = None,
) -> PaginatedResponse[PostOut]:
    if page < 1:
        raise ValidationError("page must be >= 1")
    if limit < 1:
        raise ValidationError("limit must be >= 1")

    query = query or PostQuery()
    filters = query.model_dump()
    posts = await post_repository.get_posts(db, offset=(page - 1) * limit, limit=limit, **filters)
    total = await post_repository.count_posts(db, **filters)

    total_pages = max(1, (total + limit - 1) // limit)
    pagination = PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
    items = [PostOut.model_validate(p) for p in posts]
    return PaginatedResponse[PostOut].ok(items=items, pagination=pagination)


async def get_post_by_id(db: AsyncSession, post_id: uuid.UUID, *, runtime: Runtime) -> SuccessResponse[PostOut]:
    async def _load() -> PostOut | None:
        post = await post_repository.get_post_by_id(db, post_id)
        return PostOut.model_validate(post) if post else None

    data = await runtime.cache.get_or_load(Post, post_id, _load)
    if data is None:
        raise NotFoundError(f"Post with id {post_id} not found")
    return SuccessResponse[PostOut].ok(_with_current_status(data))


async def get_post_by_slug(db: AsyncSession, type_id: uuid.UUID, slug: str) -> SuccessResponse[PostOut]:
    post = await post_repository.get_post_by_slug(db, type_id, slug)
    if not post:
        raise NotFoundError(f"Post '{slug}' not found")
    return SuccessResponse[PostOut].ok(PostOut.model_validate(post))


async def create_post(db: AsyncSession, post_data: PostCreate, *, runtime: Runtime) -> SuccessResponse[PostOut]:
    post_type = await post_type_repository.get_post_type_by_id(db, post_data.type_id)
    if not post_type:
        raise ValidationError(f"Unknown post type {post_data.type_id}")

    fields = post_data.model_dump(include=set(UPDATABLE_FIELDS))
    post = Post(type_id=post_data.type_id, published=_naive_utc(post_data.published), **fields)
    post.categories = await taxonomy_repository.get_categories_by_ids(db, post_data.category_ids)
    post.attachments = await taxonomy_repository.get_media_by_ids(db, post_data.attachment_ids)

    await _persist(db, post, runtime)
    return SuccessResponse[PostOut].ok(PostOut.model_validate(post), message="Post created")


async def update_post(
    db: AsyncSession, post_id: uuid.UUID, payload: PostUpdate, *, runtime: Runtime
) -> SuccessResponse[PostOut]:
    post = await _require_post(db, post_id)

    changes = payload.model_dump(include=set(UPDATABLE_FIELDS), exclude_unset=True)
    for field, value in changes.items():
        setattr(post, field, value)
    if payload.category_ids is not None:
        post.categories = await taxonomy_repository.get_categories_by_ids(db, payload.category_ids)
    if payload.attachment_ids is not None:
        post.attachments = await taxonomy_repository.get_media_by_ids(db, payload.attachment_ids)

    await _persist(db, post, runtime)
    return SuccessResponse[PostOut].ok(PostOut.model_validate(post), message="Post updated")


async def set_published(
    db: AsyncSession, post_id: uuid.UUID, published: bool, *, runtime: Runtime
) -> SuccessResponse[PostOut]:
    post = await _require_post(db, post_id)
    if published and post.published is None:
        post.published = _utcnow()
    elif not published:
        post.published = None

    await _persist(db, post, runtime)
    return SuccessResponse[PostOut].ok(PostOut.model_validate(post))


async def delete_post(db: AsyncSession, post_id: uuid.UUID, *, runtime: Runtime) -> SuccessResponse[str]:
    post = await _require_post(db, post_id)
    try:
        await post_repository.delete_post(db, post, hooks=runtime.hooks, cache=runtime.cache)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    runtime.cache.invalidate(Post, post.id)
    return SuccessResponse[str].ok("Post deleted")


async def add_comment(
    db: AsyncSession, post_id: uuid.UUID, payload: CommentCreate, *, runtime: Runtime
) -> SuccessResponse[CommentOut]:
    post = await _require_post(db, post_id)
    comment = await comment_repository.add_comment(
        db,
        post,
        author=payload.author,
        body=payload.body,
        email=str(payload.email) if payload.email else None,
    )
    await post_repository.refresh_comment_count(db, post)
    await _persist(db, post, runtime)
    return SuccessResponse[CommentOut].ok(CommentOut.model_validate(comment), message="Comment added")


async def get_comments(db: AsyncSession, post_id: uuid.UUID) -> SuccessResponse[list[CommentOut]]:
    await _require_post(db, post_id)
    comments = await comment_repository.get_comments(db, post_id)
    return SuccessResponse[list[CommentOut]].ok([CommentOut.model_validate(c) for c in comments])
