import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models.comment import Comment
from db.models.post import Post
from db.repositories.decorators import handle_db_errors, with_retry

logger = logging.getLogger(__name__)


@handle_db_errors("comment")
async def add_comment(
    db: AsyncSession,
    post: Post,
    author: str,
    body: str,
    email: str | None = None,
    is_approved: bool = True,
) -> Comment:
    comment = Comment(post_id=post.id, author=author, email=email, body=body, is_approved=is_approved)
    post.comments.append(comment)
    db.add(comment)
    await db.flush()
    logger.info("Added comment %s to post %s", comment.id, post.id)
    return comment


@with_retry(log_prefix="listing comments")
async def get_comments(db: AsyncSession, post_id: uuid.UUID, approved_only: bool = True) -> list[Comment]:
    stmt = select(Comment).where(Comment.post_id == post_id)
    if approved_only:
        stmt = stmt.where(Comment.is_approved.is_(True))
    res = await db.execute(stmt.order_by(Comment.created_at))
    return list(res.scalars().all())
