# tests/domains/test_agt_n.py

"""
'agt' 도메인 (에이전트) API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 공개 조회 (활성 목록, 필터/페이지 목록, 상세와 매물 통계)
- 관리자 등록/수정/삭제 (프로필 이미지, 이메일 유일성, 담당 매물 확인)
"""

import json

import pytest
from httpx import AsyncClient
from sqlmodel import select

from realty.domains.agt import models as agt_models
from realty.domains.prop import models as prop_models

BASE = "/api/v1/agents"


def _image(png_bytes: bytes, name: str = "agent.png"):
    return {"image": (name, png_bytes, "image/png")}


async def _create_agent(client: AsyncClient, png_bytes: bytes, name: str, email: str, **fields):
    data = {"name": name, "email": email, "phone": "+971 50 000 0000", **fields}
    response = await client.post(f"{BASE}/", data=data, files=_image(png_bytes))
    assert response.status_code == 201, response.text
    return response.json()["data"]["agent"]


async def _insert_property(db_session, agent_id: int, status: str = "active", title: str = "Marina View"):
    prop = prop_models.Property(
        title=title,
        description="Two bedroom apartment with sea view",
        location="Dubai Marina",
        price=1_500_000,
        bedrooms=2,
        bathrooms=2,
        area="1200 sqft",
        image="https://res.cloudinary.com/demo/image/upload/v1/properties/seed.png",
        category="residential",
        status=status,
        agent_id=agent_id,
    )
    db_session.add(prop)
    await db_session.commit()
    await db_session.refresh(prop)
    return prop


# =============================================================================
# 1. 등록
# =============================================================================
@pytest.mark.asyncio
async def test_create_agent(admin_client: AsyncClient, asset_store, png_bytes):
    agent = await _create_agent(
        admin_client, png_bytes, "Sara Khan", "Sara@Example.com",
        specialization="luxury",
        languages="English, Arabic",
        social_media=json.dumps({"linkedin": "https://linkedin.com/in/sara"}),
    )

    assert agent["email"] == "sara@example.com"
    assert agent["specialization"] == "luxury"
    assert agent["languages"] == ["English", "Arabic"]
    assert agent["social_media"]["linkedin"] == "https://linkedin.com/in/sara"
    assert agent["working_hours"]["saturday"]["available"] is False
    assert agent["rating"] == {"average": 0, "total_reviews": 0}
    assert agent["image"].endswith("agents/img1.png")
    assert agent["created_by"]["username"] == "sysadm"
    assert asset_store.uploads == ["agents/img1"]


@pytest.mark.asyncio
async def test_create_agent_requires_image(admin_client: AsyncClient, asset_store):
    response = await admin_client.post(
        f"{BASE}/", data={"name": "No Photo", "email": "nophoto@example.com", "phone": "123"}
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "image", "message": "Agent image is required"}]
    assert asset_store.uploads == []


@pytest.mark.asyncio
async def test_create_agent_validation_errors(admin_client: AsyncClient, png_bytes):
    response = await admin_client.post(
        f"{BASE}/", data={"name": "A", "email": "not-an-email"}, files=_image(png_bytes)
    )

    assert response.status_code == 400
    assert {error["field"] for error in response.json()["errors"]} == {"name", "email", "phone"}


@pytest.mark.asyncio
async def test_create_agent_duplicate_email(admin_client: AsyncClient, asset_store, png_bytes):
    await _create_agent(admin_client, png_bytes, "First Agent", "dup@example.com")

    response = await admin_client.post(
        f"{BASE}/",
        data={"name": "Second Agent", "email": "DUP@example.com", "phone": "123"},
        files=_image(png_bytes),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == "Agent with this email already exists"
    assert asset_store.uploads == ["agents/img1"]


@pytest.mark.asyncio
async def test_create_agent_requires_admin(client: AsyncClient, authorized_client: AsyncClient, png_bytes):
    data = {"name": "Sara Khan", "email": "sara@example.com", "phone": "123"}

    assert (await client.post(f"{BASE}/", data=data, files=_image(png_bytes))).status_code == 401
    assert (await authorized_client.post(f"{BASE}/", data=data, files=_image(png_bytes))).status_code == 403


# =============================================================================
# 2. 공개 조회
# =============================================================================
@pytest.mark.asyncio
async def test_list_agents_filters_and_pagination(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    await _create_agent(admin_client, png_bytes, "Charlie", "charlie@example.com", specialization="commercial")
    await _create_agent(admin_client, png_bytes, "Alice", "alice@example.com")
    await _create_agent(admin_client, png_bytes, "Bob", "bob@example.com", is_active="false")

    response = await client.get(f"{BASE}/", params={"limit": 2})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [a["name"] for a in data["agents"]] == ["Alice", "Bob"]
    assert data["agents"][0]["property_count"] == 0
    assert data["pagination"] == {
        "current_page": 1, "total_pages": 2, "total_agents": 3, "has_next_page": True, "has_prev_page": False,
    }

    response = await client.get(f"{BASE}/", params={"specialization": "commercial"})
    assert [a["name"] for a in response.json()["data"]["agents"]] == ["Charlie"]

    response = await client.get(f"{BASE}/", params={"search": "ALI", "sort": "-name"})
    assert [a["name"] for a in response.json()["data"]["agents"]] == ["Alice"]


@pytest.mark.asyncio
async def test_list_agents_rejects_unknown_sort(client: AsyncClient):
    response = await client.get(f"{BASE}/", params={"sort": "password"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "sort"


@pytest.mark.asyncio
async def test_active_agents_sorted_by_name(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    await _create_agent(admin_client, png_bytes, "Zed", "zed@example.com")
    await _create_agent(admin_client, png_bytes, "Amy", "amy@example.com")
    await _create_agent(admin_client, png_bytes, "Off Duty", "off@example.com", is_active="false")

    response = await client.get(f"{BASE}/active")

    agents = response.json()["data"]["agents"]
    assert [a["name"] for a in agents] == ["Amy", "Zed"]
    assert set(agents[0]) == {"id", "name", "email", "phone", "specialization"}


@pytest.mark.asyncio
async def test_read_agent_with_property_stats(client: AsyncClient, admin_client: AsyncClient, db_session, png_bytes):
    agent = await _create_agent(admin_client, png_bytes, "Sara Khan", "sara@example.com")
    await _insert_property(db_session, agent["id"], "active", "Active One")
    await _insert_property(db_session, agent["id"], "draft", "Draft One")
    await _insert_property(db_session, agent["id"], "deleted", "Gone")

    response = await client.get(f"{BASE}/{agent['id']}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["agent"]["stats"] == {"total_properties": 2, "active_properties": 1}
    assert [p["title"] for p in data["properties"]] == ["Active One"]
    assert data["properties"][0]["agent"]["name"] == "Sara Khan"


@pytest.mark.asyncio
async def test_read_agent_not_found(client: AsyncClient):
    response = await client.get(f"{BASE}/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Agent not found"}


# =============================================================================
# 3. 수정
# =============================================================================
@pytest.mark.asyncio
async def test_update_agent_fields_and_clear(admin_client: AsyncClient, png_bytes):
    agent = await _create_agent(
        admin_client, png_bytes, "Sara Khan", "sara@example.com", bio="Ten years in Dubai", languages="English"
    )

    response = await admin_client.put(
        f"{BASE}/{agent['id']}",
        data={"experience": "12", "bio": "", "languages": '["English", "French"]', "name": ""},
    )

    assert response.status_code == 200, response.text
    updated = response.json()["data"]["agent"]
    assert response.json()["message"] == "Agent updated successfully"
    assert updated["experience"] == 12
    assert updated["bio"] == ""
    assert updated["languages"] == ["English", "French"]
    assert updated["name"] == "Sara Khan"


@pytest.mark.asyncio
async def test_update_agent_replaces_image(admin_client: AsyncClient, asset_store, png_bytes):
    agent = await _create_agent(admin_client, png_bytes, "Sara Khan", "sara@example.com")

    response = await admin_client.put(f"{BASE}/{agent['id']}", files=_image(png_bytes, "new.png"))

    assert response.status_code == 200
    assert response.json()["data"]["agent"]["image"].endswith("agents/img2.png")
    assert asset_store.deleted == ["agents/img1"]
    assert "warnings" not in response.json()


@pytest.mark.asyncio
async def test_update_agent_email_taken(admin_client: AsyncClient, png_bytes):
    await _create_agent(admin_client, png_bytes, "First Agent", "first@example.com")
    second = await _create_agent(admin_client, png_bytes, "Second Agent", "second@example.com")

    response = await admin_client.put(f"{BASE}/{second['id']}", data={"email": "first@example.com"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


# =============================================================================
# 4. 삭제
# =============================================================================
@pytest.mark.asyncio
async def test_delete_agent_with_active_property_is_rejected(admin_client: AsyncClient, db_session, png_bytes):
    agent = await _create_agent(admin_client, png_bytes, "Sara Khan", "sara@example.com")
    await _insert_property(db_session, agent["id"], "active")

    response = await admin_client.delete(f"{BASE}/{agent['id']}")

    assert response.status_code == 400
    assert response.json()["message"].startswith("Cannot delete agent with active properties")
    assert await db_session.get(agt_models.Agent, agent["id"]) is not None


@pytest.mark.asyncio
async def test_delete_agent_releases_inactive_properties(
    admin_client: AsyncClient, db_session, asset_store, png_bytes
):
    agent = await _create_agent(admin_client, png_bytes, "Sara Khan", "sara@example.com")
    prop = await _insert_property(db_session, agent["id"], "inactive")

    response = await admin_client.delete(f"{BASE}/{agent['id']}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Agent deleted successfully"}
    assert asset_store.deleted == ["agents/img1"]
    result = await db_session.execute(
        select(prop_models.Property.agent_id).where(prop_models.Property.id == prop.id)
    )
    assert result.scalar_one() is None


@pytest.mark.asyncio
async def test_delete_agent_image_failure_is_warning(admin_client: AsyncClient, asset_store, png_bytes):
    agent = await _create_agent(admin_client, png_bytes, "Sara Khan", "sara@example.com")
    asset_store.fail_deletes = True

    response = await admin_client.delete(f"{BASE}/{agent['id']}")

    assert response.status_code == 200
    assert response.json()["warnings"][0].startswith("Could not delete previous image agents/img1")
