# tests/domains/test_prop_n.py

"""
'prop' 도메인 (매물) API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 공개 조회 (랜딩 페이지, 필터 목록, 상세와 조회수, 비공개 매물 접근 제한)
- 관리자 등록/수정/삭제 (대표/갤러리/평면도 이미지)
"""

import json

import pytest
from httpx import AsyncClient

from realty.domains.prop import models as prop_models

BASE = "/api/v1/properties"


def _png(png_bytes: bytes, name: str):
    return (name, png_bytes, "image/png")


async def _create_agent(admin_client: AsyncClient, png_bytes: bytes, email: str = "sara@example.com") -> int:
    response = await admin_client.post(
        "/api/v1/agents/",
        data={"name": "Sara Khan", "email": email, "phone": "123"},
        files={"image": _png(png_bytes, "agent.png")},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["agent"]["id"]


def _form(agent_id: int, **overrides) -> dict:
    data = {
        "title": "Marina View Apartment",
        "description": "Two bedroom apartment with sea view",
        "location": "Dubai Marina",
        "price": "1500000",
        "bedrooms": "2",
        "bathrooms": "2.5",
        "area": "1200 sqft",
        "agent_id": str(agent_id),
        "category": "residential",
        "status": "active",
    }
    data.update(overrides)
    return data


async def _create_property(admin_client: AsyncClient, png_bytes: bytes, agent_id: int, files=None, **overrides):
    files = files or [("image", _png(png_bytes, "main.png"))]
    response = await admin_client.post(f"{BASE}/", data=_form(agent_id, **overrides), files=files)
    assert response.status_code == 201, response.text
    return response.json()["data"]["property"]


# =============================================================================
# 1. 등록
# =============================================================================
@pytest.mark.asyncio
async def test_create_property_with_gallery_and_floor_plans(admin_client: AsyncClient, asset_store, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    files = [
        ("image", _png(png_bytes, "main.png")),
        ("images", _png(png_bytes, "g1.png")),
        ("images", _png(png_bytes, "g2.png")),
        ("floor_plans", _png(png_bytes, "f1.png")),
        ("floor_plans", _png(png_bytes, "f2.png")),
    ]

    prop = await _create_property(
        admin_client, png_bytes, agent_id, files=files,
        floor_plan_names='["Ground floor"]',
        amenities="Pool, Gym",
        coordinates=json.dumps({"lat": 25.08, "lng": 55.14}),
    )

    assert prop["image"].endswith("properties/img2.png")
    assert [url.rsplit("/", 1)[-1] for url in prop["images"]] == ["img3.png", "img4.png"]
    assert [plan["name"] for plan in prop["floor_plans"]] == ["Ground floor", "Floor Plan 2"]
    assert prop["amenities"] == ["Pool", "Gym"]
    assert prop["coordinates"] == {"lat": 25.08, "lng": 55.14}
    assert prop["bathrooms"] == 2.5
    assert prop["views"] == 0
    assert prop["agent"]["name"] == "Sara Khan"
    assert prop["created_by"]["username"] == "sysadm"


@pytest.mark.asyncio
async def test_create_property_requires_image(admin_client: AsyncClient, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)

    response = await admin_client.post(f"{BASE}/", data=_form(agent_id))

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "image", "message": "Property image is required"}]


@pytest.mark.asyncio
async def test_create_property_unknown_agent(admin_client: AsyncClient, asset_store, png_bytes):
    response = await admin_client.post(
        f"{BASE}/", data=_form(999), files=[("image", _png(png_bytes, "main.png"))]
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "agent_id", "message": "Agent not found"}]
    assert asset_store.uploads == []


@pytest.mark.asyncio
async def test_create_property_too_many_gallery_images(admin_client: AsyncClient, asset_store, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    files = [("image", _png(png_bytes, "main.png"))] + [("images", _png(png_bytes, f"g{i}.png")) for i in range(11)]

    response = await admin_client.post(f"{BASE}/", data=_form(agent_id), files=files)

    assert response.status_code == 400
    assert response.json()["errors"][0] == {"field": "images", "message": "At most 10 files are allowed"}
    assert asset_store.uploads == ["agents/img1"]


@pytest.mark.asyncio
async def test_create_property_upload_failure_cleans_up(admin_client: AsyncClient, asset_store, png_bytes):
    """갤러리 업로드 도중 실패하면 이미 올린 대표 이미지를 정리하고 502로 응답합니다."""
    agent_id = await _create_agent(admin_client, png_bytes)
    original_upload = asset_store.upload
    calls = []

    async def flaky_upload(data, **kwargs):
        calls.append(kwargs["filename"])
        if len(calls) == 2:
            asset_store.fail_uploads = True
        return await original_upload(data, **kwargs)

    asset_store.upload = flaky_upload
    files = [("image", _png(png_bytes, "main.png")), ("images", _png(png_bytes, "g1.png"))]

    response = await admin_client.post(f"{BASE}/", data=_form(agent_id), files=files)

    assert response.status_code == 502
    assert asset_store.deleted == ["properties/img2"]


@pytest.mark.asyncio
async def test_create_property_invalid_fields(admin_client: AsyncClient, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)

    response = await admin_client.post(
        f"{BASE}/",
        data=_form(agent_id, price="-1", category="castle", virtual_tour="not a url"),
        files=[("image", _png(png_bytes, "main.png"))],
    )

    assert response.status_code == 400
    assert {error["field"] for error in response.json()["errors"]} == {"price", "category", "virtual_tour"}


# =============================================================================
# 2. 공개 조회
# =============================================================================
@pytest.mark.asyncio
async def test_public_list_shows_only_active(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    await _create_property(admin_client, png_bytes, agent_id, title="Visible Home")
    await _create_property(admin_client, png_bytes, agent_id, title="Hidden Draft", status="draft")

    public = await client.get(f"{BASE}/", params={"status": "draft"})
    admin = await admin_client.get(f"{BASE}/", params={"status": "draft"})

    assert [p["title"] for p in public.json()["data"]["properties"]] == ["Visible Home"]
    assert public.json()["data"]["pagination"]["total_properties"] == 1
    assert [p["title"] for p in admin.json()["data"]["properties"]] == ["Hidden Draft"]


@pytest.mark.asyncio
async def test_list_filters(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    await _create_property(admin_client, png_bytes, agent_id, title="Cheap Studio", price="300000", bedrooms="0")
    await _create_property(
        admin_client, png_bytes, agent_id, title="Palm Villa", price="9000000", bedrooms="5",
        location="Palm Jumeirah", category="luxury", featured="true",
    )

    async def titles(**params):
        response = await client.get(f"{BASE}/", params=params)
        assert response.status_code == 200, response.text
        return [p["title"] for p in response.json()["data"]["properties"]]

    assert await titles(minPrice=1000000) == ["Palm Villa"]
    assert await titles(maxPrice=1000000) == ["Cheap Studio"]
    assert await titles(bedrooms=5) == ["Palm Villa"]
    assert await titles(location="palm") == ["Palm Villa"]
    assert await titles(category="luxury") == ["Palm Villa"]
    assert await titles(featured="true") == ["Palm Villa"]
    assert await titles(search="studio") == ["Cheap Studio"]
    assert await titles(sort="price") == ["Cheap Studio", "Palm Villa"]


@pytest.mark.asyncio
async def test_landing(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    await _create_property(admin_client, png_bytes, agent_id, title="Featured Villa", category="luxury", featured="true")
    await _create_property(admin_client, png_bytes, agent_id, title="Office Floor", category="commercial")
    await _create_property(admin_client, png_bytes, agent_id, title="Draft Flat", status="draft")

    response = await client.get(f"{BASE}/landing")

    data = response.json()["data"]
    assert [p["title"] for p in data["featured"]] == ["Featured Villa"]
    assert {p["title"] for p in data["latest"]} == {"Featured Villa", "Office Floor"}
    assert [p["title"] for p in data["by_category"]["commercial"]] == ["Office Floor"]
    assert data["by_category"]["residential"] == []


@pytest.mark.asyncio
async def test_read_property_counts_views(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    prop = await _create_property(admin_client, png_bytes, agent_id)

    await client.get(f"{BASE}/{prop['id']}")
    response = await client.get(f"{BASE}/{prop['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["property"]["views"] == 2


@pytest.mark.asyncio
async def test_draft_property_is_admin_only(
    client: AsyncClient, authorized_client: AsyncClient, admin_client: AsyncClient, png_bytes
):
    agent_id = await _create_agent(admin_client, png_bytes)
    prop = await _create_property(admin_client, png_bytes, agent_id, status="draft")

    for viewer in (client, authorized_client):
        response = await viewer.get(f"{BASE}/{prop['id']}")
        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Property not available"}
    assert (await admin_client.get(f"{BASE}/{prop['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_read_property_invalid_token_is_401(client: AsyncClient):
    response = await client.get(f"{BASE}/1", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_read_property_not_found(client: AsyncClient):
    response = await client.get(f"{BASE}/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Property not found"}


# =============================================================================
# 3. 수정/삭제
# =============================================================================
@pytest.mark.asyncio
async def test_update_property_replaces_gallery(admin_client: AsyncClient, asset_store, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    files = [("image", _png(png_bytes, "main.png")), ("images", _png(png_bytes, "g1.png"))]
    prop = await _create_property(admin_client, png_bytes, agent_id, files=files, amenities="Pool")

    response = await admin_client.put(
        f"{BASE}/{prop['id']}",
        data={"price": "1600000", "amenities": "", "title": ""},
        files=[("images", _png(png_bytes, "g2.png"))],
    )

    assert response.status_code == 200, response.text
    updated = response.json()["data"]["property"]
    assert updated["price"] == 1600000
    assert updated["amenities"] == []
    assert updated["title"] == "Marina View Apartment"
    assert updated["images"][0].endswith("properties/img4.png")
    assert updated["image"] == prop["image"]
    assert asset_store.deleted == ["properties/img3"]


@pytest.mark.asyncio
async def test_update_property_unknown_agent(admin_client: AsyncClient, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    prop = await _create_property(admin_client, png_bytes, agent_id)

    response = await admin_client.put(f"{BASE}/{prop['id']}", data={"agent_id": "999"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == "Agent not found"


@pytest.mark.asyncio
async def test_delete_property_discards_all_images(admin_client: AsyncClient, db_session, asset_store, png_bytes):
    agent_id = await _create_agent(admin_client, png_bytes)
    files = [
        ("image", _png(png_bytes, "main.png")),
        ("images", _png(png_bytes, "g1.png")),
        ("floor_plans", _png(png_bytes, "f1.png")),
    ]
    prop = await _create_property(admin_client, png_bytes, agent_id, files=files)

    response = await admin_client.delete(f"{BASE}/{prop['id']}")

    assert response.status_code == 200
    assert response.json()["message"] == "Property deleted successfully"
    assert asset_store.deleted == ["properties/img2", "properties/img3", "properties/img4"]
    assert await db_session.get(prop_models.Property, prop["id"]) is None
