import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError, NotFoundError
import db.repositories.post_type_repository as post_type_repository
from db.utils import generate_slug
from schemas.post_types import PostTypeCreate, PostTypeOut
from schemas.responses import SuccessResponse


async def create_post_type(db: AsyncSession, payload: PostTypeCreate) -> SuccessResponse[PostTypeOut]:
    try:
        post_type = await post_type_repository.create_post_type(
            db,
            name=payload.name,
            slug=payload.slug or generate_slug(payload.name),
            description=payload.description,
            route=payload.route,
            view=payload.view,
        )
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("A post type with this slug already exists") from e
    return SuccessResponse[PostTypeOut].ok(PostTypeOut.model_validate(post_type), message="Post type created")


async def get_post_types(db: AsyncSession) -> SuccessResponse[list[PostTypeOut]]:
    types = await post_type_repository.get_post_types(db)
    return SuccessResponse[list[PostTypeOut]].ok([PostTypeOut.model_validate(t) for t in types])


async def get_post_type(db: AsyncSession, type_id: uuid.UUID) -> SuccessResponse[PostTypeOut]:
    post_type = await post_type_repository.get_post_type_by_id(db, type_id)
    if not post_type:
        raise NotFoundError(f"Post type with id {type_id} not found")
    return SuccessResponse[PostTypeOut].ok(PostTypeOut.model_validate(post_type))
