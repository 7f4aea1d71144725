from httpx import AsyncClient
import pytest

API = "/api/v1"


@pytest.mark.integration
@pytest.mark.anyio
async def test_post_type_crud(client: AsyncClient):
    r = await client.post(f"{API}/post-types", json={"name": "Press Release", "route": "/press"})
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["slug"] == "press-release"

    fetched = await client.get(f"{API}/post-types/{created['id']}")
    assert fetched.json()["data"]["route"] == "/press"

    listed = await client.get(f"{API}/post-types")
    assert [t["name"] for t in listed.json()["data"]] == ["Press Release"]


@pytest.mark.integration
@pytest.mark.anyio
async def test_duplicate_post_type_slug_conflicts(client: AsyncClient):
    await client.post(f"{API}/post-types", json={"name": "Blog"})

    r = await client.post(f"{API}/post-types", json={"name": "Another blog", "slug": "blog"})

    assert r.status_code == 409
    assert r.json()["error"]["type"] == "ConflictError"


@pytest.mark.integration
@pytest.mark.anyio
async def test_categories(client: AsyncClient):
    r = await client.post(f"{API}/categories", json={"name": "Tech", "description": "Technology"})
    assert r.status_code == 201
    assert r.json()["data"]["slug"] == "tech"

    duplicate = await client.post(f"{API}/categories", json={"name": "Tech again", "slug": "tech"})
    assert duplicate.status_code == 409

    listed = await client.get(f"{API}/categories")
    assert [c["slug"] for c in listed.json()["data"]] == ["tech"]


@pytest.mark.integration
@pytest.mark.anyio
async def test_media_attach_to_post(client: AsyncClient):
    media = await client.post(
        f"{API}/media",
        json={"filename": "cover.png", "content_type": "image/png", "size": 2048, "alt_text": "Cover"},
    )
    assert media.status_code == 201
    media_id = media.json()["data"]["id"]

    type_id = (await client.post(f"{API}/post-types", json={"name": "Blog"})).json()["data"]["id"]
    post = await client.post(
        f"{API}/posts", json={"type_id": type_id, "title": "Illustrated", "attachment_ids": [media_id]}
    )

    assert post.status_code == 201
    assert [a["filename"] for a in post.json()["data"]["attachments"]] == ["cover.png"]


@pytest.mark.integration
@pytest.mark.anyio
async def test_system_endpoints(client: AsyncClient):
    root = await client.get("/")
    assert root.status_code == 200
    assert root.json()["success"] is True

    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["cache"]["enabled"] is True
    assert "X-Request-Id" in health.headers
