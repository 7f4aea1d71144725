import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models.post_type import PostType
from db.repositories.decorators import handle_db_errors, with_retry

logger = logging.getLogger(__name__)


@handle_db_errors("post type")
async def create_post_type(
    db: AsyncSession,
    name: str,
    slug: str,
    description: str | None = None,
    route: str | None = None,
    view: str | None = None,
) -> PostType:
    post_type = PostType(name=name, slug=slug, description=description, route=route, view=view)
    db.add(post_type)
    await db.flush()
    logger.info("Created post type %s (%s)", post_type.id, slug)
    return post_type


@with_retry(log_prefix="fetching post type")
async def get_post_type_by_id(db: AsyncSession, type_id: uuid.UUID) -> PostType | None:
    return await db.get(PostType, type_id)


@with_retry(log_prefix="listing post types")
async def get_post_types(db: AsyncSession) -> list[PostType]:
    res = await db.execute(select(PostType).order_by(PostType.name))
    return list(res.scalars().all())
