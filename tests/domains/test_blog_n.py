# tests/domains/test_blog_n.py

"""
'blog' 도메인 API 엔드포인트와 slug/읽기 시간 계산에 대한 테스트 모듈입니다.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from realty.core.models import utcnow
from realty.domains.blog import services as blog_services

BASE = "/api/v1/blogs"

CONTENT = " ".join(["word"] * 250)


def _form(**overrides) -> dict:
    data = {
        "title": "Buying Your First Home",
        "content": CONTENT,
        "excerpt": "A short guide for first-time buyers",
        "author": "Sara Khan",
        "category": "guides",
        "status": "published",
    }
    data.update(overrides)
    return data


async def _create_post(admin_client: AsyncClient, png_bytes: bytes, **overrides) -> dict:
    response = await admin_client.post(
        f"{BASE}/", data=_form(**overrides), files={"image": ("cover.png", png_bytes, "image/png")}
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["blog"]


# =============================================================================
# 1. slug / read_time
# =============================================================================
def test_make_slug_strips_punctuation():
    assert blog_services.make_slug("Top 10 Tips: Dubai  Homes!", 1700000000000) == "top-10-tips-dubai-homes-1700000000000"


@pytest.mark.parametrize("words, minutes", [(0, 1), (1, 1), (200, 1), (201, 2), (1000, 5)])
def test_compute_read_time(words: int, minutes: int):
    assert blog_services.compute_read_time(" ".join(["w"] * words)) == minutes


# =============================================================================
# 2. 등록/수정/삭제
# =============================================================================
@pytest.mark.asyncio
async def test_create_blog(admin_client: AsyncClient, asset_store, png_bytes):
    post = await _create_post(admin_client, png_bytes, tags="Dubai, Buying ,")

    assert post["slug"].startswith("buying-your-first-home-")
    assert post["read_time"] == 2
    assert post["tags"] == ["dubai", "buying"]
    assert post["image"].endswith("blogs/img1.png")
    assert post["views"] == 0 and post["likes"] == 0
    assert post["created_by"]["username"] == "sysadm"


@pytest.mark.asyncio
async def test_create_blog_validation(admin_client: AsyncClient, png_bytes):
    response = await admin_client.post(
        f"{BASE}/",
        data=_form(content="too short", excerpt="short", status="secret"),
        files={"image": ("cover.png", png_bytes, "image/png")},
    )

    assert response.status_code == 400
    assert {error["field"] for error in response.json()["errors"]} == {"content", "excerpt", "status"}


@pytest.mark.asyncio
async def test_create_blog_requires_image(admin_client: AsyncClient):
    response = await admin_client.post(f"{BASE}/", data=_form())

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "image", "message": "Blog image is required"}]


@pytest.mark.asyncio
async def test_update_blog_regenerates_slug_and_read_time(admin_client: AsyncClient, png_bytes):
    post = await _create_post(admin_client, png_bytes)

    response = await admin_client.put(
        f"{BASE}/{post['id']}", data={"title": "Selling Your Home", "content": " ".join(["word"] * 650)}
    )

    assert response.status_code == 200, response.text
    updated = response.json()["data"]["blog"]
    assert updated["slug"].startswith("selling-your-home-")
    assert updated["read_time"] == 4


@pytest.mark.asyncio
async def test_update_blog_keeps_slug_when_title_unchanged(admin_client: AsyncClient, png_bytes):
    post = await _create_post(admin_client, png_bytes)

    response = await admin_client.put(f"{BASE}/{post['id']}", data={"featured": "true", "tags": ""})

    updated = response.json()["data"]["blog"]
    assert updated["slug"] == post["slug"]
    assert updated["featured"] is True
    assert updated["tags"] == []


@pytest.mark.asyncio
async def test_delete_blog_discards_image(admin_client: AsyncClient, asset_store, png_bytes):
    post = await _create_post(admin_client, png_bytes)

    response = await admin_client.delete(f"{BASE}/{post['id']}")

    assert response.status_code == 200
    assert response.json()["message"] == "Blog post deleted successfully"
    assert asset_store.deleted == ["blogs/img1"]
    assert (await admin_client.get(f"{BASE}/{post['id']}")).status_code == 404


# =============================================================================
# 3. 공개 조회
# =============================================================================
@pytest.mark.asyncio
async def test_public_list_hides_drafts_and_scheduled(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    await _create_post(admin_client, png_bytes, title="Live Post")
    await _create_post(admin_client, png_bytes, title="Draft Post", status="draft")
    tomorrow = (utcnow() + timedelta(days=1)).isoformat()
    await _create_post(admin_client, png_bytes, title="Scheduled Post", publish_date=tomorrow)

    public = await client.get(f"{BASE}/")
    admin = await admin_client.get(f"{BASE}/", params={"status": "draft"})

    assert [p["title"] for p in public.json()["data"]["blogs"]] == ["Live Post"]
    assert public.json()["data"]["pagination"]["total_blogs"] == 1
    assert [p["title"] for p in admin.json()["data"]["blogs"]] == ["Draft Post"]


@pytest.mark.asyncio
async def test_list_filters_by_tags_and_search(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    await _create_post(admin_client, png_bytes, title="Mortgage Basics", tags="finance,buying")
    await _create_post(admin_client, png_bytes, title="Interior Trends", tags="design", category="design")

    async def titles(**params):
        response = await client.get(f"{BASE}/", params=params)
        assert response.status_code == 200, response.text
        return [p["title"] for p in response.json()["data"]["blogs"]]

    assert await titles(tags="Finance") == ["Mortgage Basics"]
    assert await titles(tags="design, nothing") == ["Interior Trends"]
    assert await titles(category="design") == ["Interior Trends"]
    assert await titles(search="mortgage") == ["Mortgage Basics"]
    assert await titles(sort="title") == ["Interior Trends", "Mortgage Basics"]


@pytest.mark.asyncio
async def test_featured_blogs(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    await _create_post(admin_client, png_bytes, title="Featured Post", featured="true")
    await _create_post(admin_client, png_bytes, title="Plain Post")
    await _create_post(admin_client, png_bytes, title="Featured Draft", featured="true", status="draft")

    response = await client.get(f"{BASE}/featured")

    assert [p["title"] for p in response.json()["data"]["blogs"]] == ["Featured Post"]


@pytest.mark.asyncio
async def test_read_blog_by_id_or_slug_counts_views(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    post = await _create_post(admin_client, png_bytes)

    by_id = await client.get(f"{BASE}/{post['id']}")
    by_slug = await client.get(f"{BASE}/{post['slug']}")

    assert by_id.json()["data"]["blog"]["id"] == post["id"]
    assert by_slug.json()["data"]["blog"]["views"] == 2


@pytest.mark.asyncio
async def test_draft_blog_is_admin_only(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    post = await _create_post(admin_client, png_bytes, status="draft")

    response = await client.get(f"{BASE}/{post['slug']}")

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Blog post not available"}
    assert (await admin_client.get(f"{BASE}/{post['slug']}")).status_code == 200


@pytest.mark.asyncio
async def test_read_blog_not_found(client: AsyncClient):
    response = await client.get(f"{BASE}/no-such-post")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Blog post not found"}


@pytest.mark.asyncio
async def test_like_blog(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    post = await _create_post(admin_client, png_bytes)

    await client.post(f"{BASE}/{post['id']}/like")
    response = await client.post(f"{BASE}/{post['id']}/like")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Blog post liked successfully", "data": {"likes": 2}}
    assert (await client.post(f"{BASE}/999/like")).status_code == 404
