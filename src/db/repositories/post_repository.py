import logging
from typing import Any
import uuid

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import ModelCache
from core.exceptions import ValidationError, ValidationFailure
from core.hooks import HookEvent, HookRegistry
from db.models.comment import Comment
from db.models.post import SLUG_MAX_LENGTH, Post, post_categories
from db.repositories.decorators import handle_db_errors, with_retry
from db.utils import generate_slug
from services.post_validation import validate_post

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIMIT: int = 100


class SqlPostSlugReader:
    """Answers the type+slug uniqueness question from the current session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @with_retry(log_prefix="checking slug uniqueness")
    async def count_slug_conflicts(self, type_id: uuid.UUID, slug: str, exclude_id: uuid.UUID | None) -> int:
        stmt = select(func.count(Post.id)).where(Post.type_id == type_id, Post.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Post.id != exclude_id)
        # The candidate may already be dirty in this session; never write it before it validates
        with self.db.sync_session.no_autoflush:
            res = await self.db.execute(stmt)
        return int(res.scalar_one())


def _filtered(stmt: Any, type_id: uuid.UUID | None, category_id: uuid.UUID | None, published_only: bool) -> Any:
    if type_id is not None:
        stmt = stmt.where(Post.type_id == type_id)
    if category_id is not None:
        stmt = stmt.where(
            Post.id.in_(select(post_categories.c.post_id).where(post_categories.c.category_id == category_id))
        )
    if published_only:
        stmt = stmt.where(Post.is_published)
    return stmt


@with_retry(log_prefix="fetching post")
async def get_post_by_id(db: AsyncSession, post_id: uuid.UUID) -> Post | None:
    stmt = select(Post).where(Post.id == post_id)
    res = await db.execute(stmt)
    post = res.scalars().first()
    if not post:
        logger.info("Post with id %s not found", post_id)
    return post


@with_retry(log_prefix="fetching post by slug")
async def get_post_by_slug(db: AsyncSession, type_id: uuid.UUID, slug: str) -> Post | None:
    stmt = select(Post).where(Post.type_id == type_id, Post.slug == slug)
    res = await db.execute(stmt)
    return res.scalars().first()


@with_retry(log_prefix="fetching posts")
async def get_posts(
    db: AsyncSession,
    *,
    type_id: uuid.UUID | None = None,
    category_id: uuid.UUID | None = None,
    published_only: bool = False,
    offset: int = 0,
    limit: int = DEFAULT_MAX_LIMIT,
) -> list[Post]:
    if offset < 0:
        raise ValidationError("offset must be an integer >= 0")
    if limit <= 0 or limit > DEFAULT_MAX_LIMIT:
        raise ValidationError(f"limit must be in 1..{DEFAULT_MAX_LIMIT}")

    stmt = _filtered(select(Post), type_id, category_id, published_only)
    stmt = stmt.order_by(Post.published.desc().nulls_last(), Post.created_at.desc(), Post.id).offset(offset).limit(limit)
    res = await db.execute(stmt)
    return list(res.scalars().all())


@with_retry(log_prefix="counting posts")
async def count_posts(
    db: AsyncSession,
    *,
    type_id: uuid.UUID | None = None,
    category_id: uuid.UUID | None = None,
    published_only: bool = False,
) -> int:
    stmt = _filtered(select(func.count(Post.id)), type_id, category_id, published_only)
    res = await db.execute(stmt)
    return int(res.scalar_one())


@handle_db_errors("post")
async def save_post(db: AsyncSession, post: Post, *, hooks: HookRegistry, cache: ModelCache) -> Post:
    """Validate, run save hooks, evict the cached copy and flush the post.

    A failing validation raises ValidationFailure before any hook, eviction
    or write takes place.
    """
    if not post.slug:
        # Titles without ASCII letters or digits still need an addressable slug
        post.slug = generate_slug(post.title, SLUG_MAX_LENGTH) or f"post-{post.id.hex[:8]}"

    result = await validate_post(post, SqlPostSlugReader(db))
    if not result.is_valid:
        raise ValidationFailure.from_result(result)

    hooks.dispatch(Post, HookEvent.SAVE, post)
    cache.invalidate(Post, post.id)

    db.add(post)
    await db.flush()
    logger.info("Saved post %s (type=%s, slug=%s)", post.id, post.type_id, post.slug)
    return post


@handle_db_errors("post")
async def delete_post(db: AsyncSession, post: Post, *, hooks: HookRegistry, cache: ModelCache) -> None:
    """Run delete hooks, evict the cached copy and remove the post."""
    hooks.dispatch(Post, HookEvent.DELETE, post)
    cache.invalidate(Post, post.id)

    state = sa_inspect(post)
    if state.pending:
        db.expunge(post)
    elif state.persistent:
        await db.delete(post)
        await db.flush()
    logger.info("Deleted post %s", post.id)


@with_retry(log_prefix="counting comments")
async def refresh_comment_count(db: AsyncSession, post: Post) -> int:
    stmt = select(func.count(Comment.id)).where(Comment.post_id == post.id)
    res = await db.execute(stmt)
    post.comment_count = int(res.scalar_one())
    return post.comment_count
