import uuid

import pytest

from services.post_validation import SLUG_NOT_UNIQUE_MESSAGE, validate_post
from tests.factories.posts import build_post


class StubSlugReader:
    def __init__(self, conflicts: int = 0):
        self.conflicts = conflicts
        self.calls: list[tuple[uuid.UUID, str, uuid.UUID | None]] = []

    async def count_slug_conflicts(self, type_id, slug, exclude_id):
        self.calls.append((type_id, slug, exclude_id))
        return self.conflicts


def _fields(result) -> list[str]:
    return [v.field for v in result.violations]


@pytest.mark.unit
@pytest.mark.anyio
async def test_valid_post_passes():
    result = await validate_post(build_post(), StubSlugReader())
    assert result.is_valid
    assert result.violations == []


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize("title", ["", "   ", None])
async def test_empty_title_fails(title):
    result = await validate_post(build_post(title=title), StubSlugReader())
    assert not result.is_valid
    assert _fields(result) == ["title"]


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    ("field", "limit"),
    [
        ("title", 128),
        ("keywords", 128),
        ("description", 255),
        ("route", 255),
        ("view", 255),
        ("excerpt", 512),
    ],
)
async def test_length_limits(field, limit):
    at_limit = await validate_post(build_post(**{field: "x" * limit}), StubSlugReader())
    assert at_limit.is_valid, at_limit.violations

    over_limit = await validate_post(build_post(**{field: "x" * (limit + 1)}), StubSlugReader())
    assert _fields(over_limit) == [field]


@pytest.mark.unit
@pytest.mark.anyio
async def test_optional_fields_may_be_missing():
    post = build_post(keywords=None, description=None, route=None, view=None, excerpt=None, body=None)
    result = await validate_post(post, StubSlugReader())
    assert result.is_valid


@pytest.mark.unit
@pytest.mark.anyio
async def test_slug_conflict_fails():
    result = await validate_post(build_post(), StubSlugReader(conflicts=1))
    assert not result.is_valid
    assert result.violations[0].field == "slug"
    assert result.violations[0].message == SLUG_NOT_UNIQUE_MESSAGE


@pytest.mark.unit
@pytest.mark.anyio
async def test_slug_check_excludes_own_identity():
    post = build_post()
    reader = StubSlugReader()
    await validate_post(post, reader)
    assert reader.calls == [(post.type_id, post.slug, post.id)]


@pytest.mark.unit
@pytest.mark.anyio
async def test_all_failures_are_collected():
    post = build_post(title="", keywords="k" * 129, excerpt="e" * 513)
    result = await validate_post(post, StubSlugReader(conflicts=2))
    assert sorted(_fields(result)) == ["excerpt", "keywords", "slug", "title"]
