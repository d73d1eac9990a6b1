# tests/domains/test_quote_n.py

"""
'quote' 도메인 (견적 요청) API 엔드포인트에 대한 통합 테스트 모듈입니다.

- 공개 제출과 입력 검증
- 관리자 목록/상세/수정/메모/삭제와 통계
"""

import pytest
from httpx import AsyncClient
from sqlmodel import select

from realty.domains.quote import models as quote_models

BASE = "/api/v1/quotes"


def _payload(**overrides) -> dict:
    payload = {
        "full_name": "Omar Haddad",
        "email": "Omar@Example.com",
        "phone_number": "+971 50 123 4567",
        "project_type": "interior-design",
        "budget_range": "25k-50k",
        "timeline": "1-3-months",
        "project_description": "Full interior redesign of a two bedroom apartment",
    }
    payload.update(overrides)
    return payload


async def _submit(client: AsyncClient, **overrides) -> int:
    response = await client.post(f"{BASE}/", json=_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]["quote_request"]["id"]


# =============================================================================
# 1. 공개 제출
# =============================================================================
@pytest.mark.asyncio
async def test_submit_quote_request(client: AsyncClient, db_session):
    response = await client.post(f"{BASE}/", json=_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Quote request submitted successfully. We will contact you soon!"
    summary = body["data"]["quote_request"]
    assert summary == {
        "id": summary["id"], "full_name": "Omar Haddad", "project_type": "interior-design", "status": "new",
    }
    stored = await db_session.get(quote_models.QuoteRequest, summary["id"])
    assert stored.email == "omar@example.com"
    assert stored.priority == "medium"
    assert stored.preferred_contact_method == "email"


@pytest.mark.asyncio
async def test_submit_quote_request_validation(client: AsyncClient):
    response = await client.post(
        f"{BASE}/",
        json=_payload(full_name="O", email="nope", budget_range="millions", project_description="short"),
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"full_name", "email", "budget_range", "project_description"}


# =============================================================================
# 2. 관리자
# =============================================================================
@pytest.mark.asyncio
async def test_admin_routes_require_admin(client: AsyncClient, authorized_client: AsyncClient):
    quote_id = await _submit(client)

    assert (await client.get(f"{BASE}/")).status_code == 401
    assert (await authorized_client.get(f"{BASE}/{quote_id}")).status_code == 403
    assert (await authorized_client.get(f"{BASE}/statistics")).status_code == 403


@pytest.mark.asyncio
async def test_list_quote_requests_with_filters(client: AsyncClient, admin_client: AsyncClient):
    await _submit(client, full_name="Omar Haddad")
    await _submit(client, full_name="Lina Saleh", project_type="renovation", budget_range="over-500k")

    response = await admin_client.get(f"{BASE}/", params={"project_type": "renovation"})

    data = response.json()["data"]
    assert [q["full_name"] for q in data["quote_requests"]] == ["Lina Saleh"]
    assert data["pagination"]["total_requests"] == 1

    response = await admin_client.get(f"{BASE}/", params={"search": "omar@"})
    assert [q["full_name"] for q in response.json()["data"]["quote_requests"]] == ["Omar Haddad"]


@pytest.mark.asyncio
async def test_update_quote_request_assigns_agent(client: AsyncClient, admin_client: AsyncClient, png_bytes):
    quote_id = await _submit(client)
    agent = await admin_client.post(
        "/api/v1/agents/",
        data={"name": "Sara Khan", "email": "sara@example.com", "phone": "123"},
        files={"image": ("agent.png", png_bytes, "image/png")},
    )
    agent_id = agent.json()["data"]["agent"]["id"]

    response = await admin_client.put(
        f"{BASE}/{quote_id}",
        json={"status": "in-progress", "priority": "high", "assigned_to_id": agent_id,
              "estimated_quote_amount": 42000, "follow_up_date": "2026-11-01T09:00:00Z"},
    )

    assert response.status_code == 200, response.text
    quote = response.json()["data"]["quote_request"]
    assert quote["status"] == "in-progress"
    assert quote["priority"] == "high"
    assert quote["assigned_to"]["name"] == "Sara Khan"
    assert quote["estimated_quote_amount"] == 42000
    assert quote["follow_up_date"].startswith("2026-11-01T09:00:00")


@pytest.mark.asyncio
async def test_update_quote_request_unknown_agent(client: AsyncClient, admin_client: AsyncClient):
    quote_id = await _submit(client)

    response = await admin_client.put(f"{BASE}/{quote_id}", json={"assigned_to_id": 999})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Assigned agent not found"}


@pytest.mark.asyncio
async def test_update_quote_request_null_status_is_ignored(client: AsyncClient, admin_client: AsyncClient):
    quote_id = await _submit(client)

    response = await admin_client.put(f"{BASE}/{quote_id}", json={"status": None, "priority": "low"})

    quote = response.json()["data"]["quote_request"]
    assert quote["status"] == "new"
    assert quote["priority"] == "low"


@pytest.mark.asyncio
async def test_add_note(client: AsyncClient, admin_client: AsyncClient):
    quote_id = await _submit(client)

    await admin_client.post(f"{BASE}/{quote_id}/notes", json={"content": "  Called the client  "})
    response = await admin_client.post(f"{BASE}/{quote_id}/notes", json={"content": "Sent estimate"})

    assert response.status_code == 200
    assert response.json()["message"] == "Note added successfully"
    notes = response.json()["data"]["quote_request"]["notes"]
    assert [n["content"] for n in notes] == ["Called the client", "Sent estimate"]
    assert notes[0]["added_by"]["username"] == "sysadm"


@pytest.mark.asyncio
async def test_add_empty_note_is_rejected(client: AsyncClient, admin_client: AsyncClient):
    quote_id = await _submit(client)

    response = await admin_client.post(f"{BASE}/{quote_id}/notes", json={"content": "   "})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Note content is required"}


@pytest.mark.asyncio
async def test_delete_quote_request_removes_notes(client: AsyncClient, admin_client: AsyncClient, db_session):
    quote_id = await _submit(client)
    await admin_client.post(f"{BASE}/{quote_id}/notes", json={"content": "Follow up"})

    response = await admin_client.delete(f"{BASE}/{quote_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Quote request deleted successfully"}
    notes = await db_session.execute(select(quote_models.QuoteNote))
    assert notes.scalars().all() == []
    missing = await admin_client.get(f"{BASE}/{quote_id}")
    assert missing.json() == {"success": False, "message": "Quote request not found"}


@pytest.mark.asyncio
async def test_statistics(client: AsyncClient, admin_client: AsyncClient):
    first = await _submit(client, full_name="Omar Haddad")
    await _submit(client, full_name="Lina Saleh", project_type="renovation")
    await _submit(client, full_name="Yusuf Ali", project_type="renovation", budget_range="over-500k")
    await admin_client.put(f"{BASE}/{first}", json={"status": "completed"})

    response = await admin_client.get(f"{BASE}/statistics")

    data = response.json()["data"]
    assert data["overview"] == {"total": 3, "new": 2, "in_progress": 0, "completed": 1}
    assert data["project_types"] == [
        {"value": "renovation", "count": 2}, {"value": "interior-design", "count": 1},
    ]
    assert data["budget_ranges"] == [{"value": "25k-50k", "count": 2}, {"value": "over-500k", "count": 1}]
    assert len(data["recent_requests"]) == 3
    assert set(data["recent_requests"][0]) == {"id", "full_name", "project_type", "status", "created_at"}
