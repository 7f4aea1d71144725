from datetime import UTC, datetime, timedelta
import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import ModelCache
from core.exceptions import ConflictError, NotFoundError, ValidationError, ValidationFailure
from core.hooks import HookRegistry
from core.runtime import Runtime
from db.models.post import Post
import db.repositories.post_repository as post_repository
from schemas.comments import CommentCreate
from schemas.posts import PostCreate, PostUpdate
from services import post_service
from tests.factories.posts import create_category, create_post_type


@pytest.fixture
def runtime(hooks: HookRegistry, cache: ModelCache) -> Runtime:
    return Runtime(hooks=hooks, cache=cache)


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_posts_validation_error_invalid_page(db_session: AsyncSession):
    with pytest.raises(ValidationError):
        await post_service.get_posts(db_session, page=0, limit=10)


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_posts_validation_error_invalid_limit(db_session: AsyncSession):
    with pytest.raises(ValidationError):
        await post_service.get_posts(db_session, page=1, limit=0)


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_post_by_id_not_found(db_session: AsyncSession, runtime: Runtime):
    with pytest.raises(NotFoundError):
        await post_service.get_post_by_id(db_session, uuid.uuid4(), runtime=runtime)


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_post_by_id_reads_through_cache(db_session: AsyncSession, runtime: Runtime, monkeypatch):
    post_type = await create_post_type(db_session)
    created = await post_service.create_post(
        db_session, PostCreate(type_id=post_type.id, title="Cached post"), runtime=runtime
    )
    post_id = created.data.id

    first = await post_service.get_post_by_id(db_session, post_id, runtime=runtime)

    async def fail_get_post_by_id(*args, **kwargs):
        raise AssertionError("repository should not be hit on a cache hit")

    monkeypatch.setattr(post_repository, "get_post_by_id", fail_get_post_by_id)
    second = await post_service.get_post_by_id(db_session, post_id, runtime=runtime)

    assert second.data == first.data
    assert runtime.cache.get(Post, post_id) is first.data


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_post_unknown_type(db_session: AsyncSession, runtime: Runtime):
    with pytest.raises(ValidationError):
        await post_service.create_post(db_session, PostCreate(type_id=uuid.uuid4(), title="Orphan"), runtime=runtime)


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_post_unknown_category(db_session: AsyncSession, runtime: Runtime):
    post_type = await create_post_type(db_session)
    payload = PostCreate(type_id=post_type.id, title="Tagged", category_ids=[uuid.uuid4()])
    with pytest.raises(ValidationError):
        await post_service.create_post(db_session, payload, runtime=runtime)


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_post_with_categories(db_session: AsyncSession, runtime: Runtime):
    post_type = await create_post_type(db_session)
    category = await create_category(db_session)
    payload = PostCreate(type_id=post_type.id, title="  Tagged   post ", category_ids=[category.id])

    response = await post_service.create_post(db_session, payload, runtime=runtime)

    assert response.data.title == "Tagged post"
    assert response.data.slug == "tagged-post"
    assert [c.slug for c in response.data.categories] == ["news"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_post_rejects_slug_taken_by_sibling(db_session: AsyncSession, runtime: Runtime):
    post_type = await create_post_type(db_session)
    await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="First"), runtime=runtime)
    second = await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="Second"), runtime=runtime)

    with pytest.raises(ValidationFailure) as exc_info:
        await post_service.update_post(db_session, second.data.id, PostUpdate(slug="first"), runtime=runtime)
    assert exc_info.value.violations[0]["field"] == "slug"


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_post_not_found(db_session: AsyncSession, runtime: Runtime):
    with pytest.raises(NotFoundError):
        await post_service.update_post(db_session, uuid.uuid4(), PostUpdate(title="New title"), runtime=runtime)


@pytest.mark.unit
@pytest.mark.anyio
async def test_integrity_error_maps_to_conflict(db_session: AsyncSession, runtime: Runtime, monkeypatch):
    post_type = await create_post_type(db_session)

    async def racing_save(*args, **kwargs):
        raise IntegrityError("INSERT INTO posts", {}, Exception("UNIQUE constraint failed"))

    monkeypatch.setattr(post_repository, "save_post", racing_save)

    with pytest.raises(ConflictError):
        await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="Race"), runtime=runtime)


@pytest.mark.unit
@pytest.mark.anyio
async def test_publish_and_unpublish(db_session: AsyncSession, runtime: Runtime):
    post_type = await create_post_type(db_session)
    created = await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="Draft"), runtime=runtime)
    assert created.data.is_published is False

    published = await post_service.set_published(db_session, created.data.id, True, runtime=runtime)
    assert published.data.is_published is True
    assert published.data.published is not None

    unpublished = await post_service.set_published(db_session, created.data.id, False, runtime=runtime)
    assert unpublished.data.is_published is False
    assert unpublished.data.published is None


@pytest.mark.unit
@pytest.mark.anyio
async def test_add_comment_updates_comment_count(db_session: AsyncSession, runtime: Runtime):
    post_type = await create_post_type(db_session)
    created = await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="Discuss"), runtime=runtime)
    await post_service.get_post_by_id(db_session, created.data.id, runtime=runtime)

    await post_service.add_comment(
        db_session, created.data.id, CommentCreate(author="Ada", body="Nice post"), runtime=runtime
    )
    await post_service.add_comment(
        db_session, created.data.id, CommentCreate(author="Linus", body="Agreed"), runtime=runtime
    )

    refreshed = await post_service.get_post_by_id(db_session, created.data.id, runtime=runtime)
    assert refreshed.data.comment_count == 2
    comments = await post_service.get_comments(db_session, created.data.id)
    assert sorted(c.author for c in comments.data) == ["Ada", "Linus"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_delete_post_then_not_found(db_session: AsyncSession, runtime: Runtime):
    post_type = await create_post_type(db_session)
    created = await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="Gone"), runtime=runtime)
    await post_service.get_post_by_id(db_session, created.data.id, runtime=runtime)

    await post_service.delete_post(db_session, created.data.id, runtime=runtime)

    with pytest.raises(NotFoundError):
        await post_service.get_post_by_id(db_session, created.data.id, runtime=runtime)


@pytest.mark.unit
@pytest.mark.anyio
async def test_read_racing_an_update_does_not_leave_stale_cache(
    db_session: AsyncSession, runtime: Runtime, monkeypatch
):
    post_type = await create_post_type(db_session)
    created = await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="Old title"), runtime=runtime)
    post_id = created.data.id
    stale = (await post_service.get_post_by_id(db_session, post_id, runtime=runtime)).data
    commit = db_session.commit

    async def commit_after_concurrent_read():
        # Another request re-caches the committed row while this write is in flight
        runtime.cache.set(Post, post_id, stale)
        await commit()

    monkeypatch.setattr(db_session, "commit", commit_after_concurrent_read)
    await post_service.update_post(db_session, post_id, PostUpdate(title="New title"), runtime=runtime)
    monkeypatch.undo()

    assert runtime.cache.get(Post, post_id) is None
    served = await post_service.get_post_by_id(db_session, post_id, runtime=runtime)
    assert served.data.title == "New title"


@pytest.mark.unit
@pytest.mark.anyio
async def test_delete_evicts_copy_cached_during_commit(db_session: AsyncSession, runtime: Runtime, monkeypatch):
    post_type = await create_post_type(db_session)
    created = await post_service.create_post(db_session, PostCreate(type_id=post_type.id, title="Doomed"), runtime=runtime)
    post_id = created.data.id
    commit = db_session.commit

    async def commit_after_concurrent_read():
        runtime.cache.set(Post, post_id, created.data)
        await commit()

    monkeypatch.setattr(db_session, "commit", commit_after_concurrent_read)
    await post_service.delete_post(db_session, post_id, runtime=runtime)
    monkeypatch.undo()

    with pytest.raises(NotFoundError):
        await post_service.get_post_by_id(db_session, post_id, runtime=runtime)


@pytest.mark.unit
@pytest.mark.anyio
async def test_cached_scheduled_post_goes_live(db_session: AsyncSession, runtime: Runtime):
    post_type = await create_post_type(db_session)
    go_live = datetime.now(UTC).replace(tzinfo=None) + timedelta(minutes=5)
    created = await post_service.create_post(
        db_session, PostCreate(type_id=post_type.id, title="Scheduled", published=go_live), runtime=runtime
    )
    first = await post_service.get_post_by_id(db_session, created.data.id, runtime=runtime)
    assert first.data.is_published is False

    # Same snapshot once the publish time has passed
    snapshot = first.data.model_copy(update={"published": go_live - timedelta(minutes=10)})
    runtime.cache.set(Post, created.data.id, snapshot)

    served = await post_service.get_post_by_id(db_session, created.data.id, runtime=runtime)
    assert served.data.is_published is True
