from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError
import db.repositories.taxonomy_repository as taxonomy_repository
from db.utils import generate_slug
from schemas.responses import SuccessResponse
from schemas.taxonomy import CategoryCreate, CategoryOut, MediaCreate, MediaOut


async def create_category(db: AsyncSession, payload: CategoryCreate) -> SuccessResponse[CategoryOut]:
    try:
        category = await taxonomy_repository.create_category(
            db,
            name=payload.name,
            slug=payload.slug or generate_slug(payload.name, 64),
            description=payload.description,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("A category with this slug already exists") from e
    return SuccessResponse[CategoryOut].ok(CategoryOut.model_validate(category), message="Category created")


async def get_categories(db: AsyncSession) -> SuccessResponse[list[CategoryOut]]:
    categories = await taxonomy_repository.get_categories(db)
    return SuccessResponse[list[CategoryOut]].ok([CategoryOut.model_validate(c) for c in categories])


async def create_media(db: AsyncSession, payload: MediaCreate) -> SuccessResponse[MediaOut]:
    media = await taxonomy_repository.create_media(
        db,
        filename=payload.filename,
        content_type=payload.content_type,
        size=payload.size,
        alt_text=payload.alt_text,
    )
    await db.commit()
    return SuccessResponse[MediaOut].ok(MediaOut.model_validate(media), message="Media created")


async def get_media(db: AsyncSession) -> SuccessResponse[list[MediaOut]]:
    items = await taxonomy_repository.get_media(db)
    return SuccessResponse[list[MediaOut]].ok([MediaOut.model_validate(m) for m in items])
