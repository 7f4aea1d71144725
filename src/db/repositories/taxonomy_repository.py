from collections.abc import Sequence
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ValidationError
from db.models.taxonomy import Category, Media
from db.repositories.decorators import handle_db_errors, with_retry

logger = logging.getLogger(__name__)


@handle_db_errors("category")
async def create_category(db: AsyncSession, name: str, slug: str, description: str | None = None) -> Category:
    category = Category(name=name, slug=slug, description=description)
    db.add(category)
    await db.flush()
    logger.info("Created category %s (%s)", category.id, slug)
    return category


@with_retry(log_prefix="listing categories")
async def get_categories(db: AsyncSession) -> list[Category]:
    res = await db.execute(select(Category).order_by(Category.name))
    return list(res.scalars().all())


@with_retry(log_prefix="fetching categories")
async def get_categories_by_ids(db: AsyncSession, ids: Sequence[uuid.UUID]) -> list[Category]:
    """Return categories in the requested order; unknown ids are a validation error."""
    if not ids:
        return []
    res = await db.execute(select(Category).where(Category.id.in_(ids)))
    found = {c.id: c for c in res.scalars().all()}
    missing = [str(i) for i in ids if i not in found]
    if missing:
        raise ValidationError(f"Unknown category ids: {', '.join(missing)}")
    return [found[i] for i in dict.fromkeys(ids)]


@handle_db_errors("media")
async def create_media(
    db: AsyncSession,
    filename: str,
    content_type: str,
    size: int = 0,
    alt_text: str | None = None,
) -> Media:
    media = Media(filename=filename, content_type=content_type, size=size, alt_text=alt_text)
    db.add(media)
    await db.flush()
    logger.info("Created media %s (%s)", media.id, filename)
    return media


@with_retry(log_prefix="listing media")
async def get_media(db: AsyncSession) -> list[Media]:
    res = await db.execute(select(Media).order_by(Media.created_at.desc()))
    return list(res.scalars().all())


@with_retry(log_prefix="fetching media")
async def get_media_by_ids(db: AsyncSession, ids: Sequence[uuid.UUID]) -> list[Media]:
    if not ids:
        return []
    res = await db.execute(select(Media).where(Media.id.in_(ids)))
    found = {m.id: m for m in res.scalars().all()}
    missing = [str(i) for i in ids if i not in found]
    if missing:
        raise ValidationError(f"Unknown media ids: {', '.join(missing)}")
    return [found[i] for i in dict.fromkeys(ids)]
