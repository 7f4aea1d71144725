import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from db.models.post import Post
from db.models.post_type import PostType
from db.models.taxonomy import Category


async def create_post_type(db: AsyncSession, *, name: str = "Blog", slug: str = "blog") -> PostType:
    post_type = PostType(name=name, slug=slug)
    db.add(post_type)
    await db.flush()
    return post_type


async def create_category(db: AsyncSession, *, name: str = "News", slug: str = "news") -> Category:
    category = Category(name=name, slug=slug)
    db.add(category)
    await db.flush()
    return category


def build_post(type_id: uuid.UUID | None = None, **overrides) -> Post:
    values = {
        "type_id": type_id or uuid.uuid4(),
        "slug": "hello-world",
        "title": "Hello world",
        "excerpt": "A short introduction",
        "body": "The first post on this site.",
    }
    values.update(overrides)
    return Post(**values)


async def insert_post(db: AsyncSession, type_id: uuid.UUID, **overrides) -> Post:
    """Persist a post directly, bypassing the repository save path."""
    post = build_post(type_id, **overrides)
    db.add(post)
    await db.flush()
    return post
