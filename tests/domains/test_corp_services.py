# tests/domains/test_corp_services.py

"""
'corp' 도메인 서비스/저장소 계층에 대한 테스트 모듈입니다.

- `merge_nested`의 병합 규칙
- 활성 회사 정보 지연 생성과 동시 생성 경합 처리
- 하위 항목 추가 시 순서 보존과 seq 충돌 재시도
- 별도 세션에서 동시에 실행한 지연 생성과 항목 추가
"""

import asyncio

import pytest
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.exceptions import NotFoundError, ValidationError
from realty.domains.corp import crud as corp_crud
from realty.domains.corp import models as corp_models
from realty.domains.corp import schemas as corp_schemas
from realty.domains.corp import services as corp_services
from realty.domains.shared.services import ImageUpload


# =============================================================================
# 1. merge_nested
# =============================================================================
def test_merge_nested_empty_partial_is_identity():
    existing = {"vision": "V", "story": [{"title": "T", "content": "C"}], "working_hours": {"monday": {"open": "9"}}}

    assert corp_services.merge_nested(existing, {}) == existing


def test_merge_nested_keeps_untouched_keys():
    existing = {"monday": {"open": "09:00", "close": "18:00"}, "tuesday": {"open": "10:00", "close": "18:00"}}

    merged = corp_services.merge_nested(existing, {"monday": {"close": "17:00"}})

    assert merged == {"monday": {"open": "09:00", "close": "17:00"}, "tuesday": {"open": "10:00", "close": "18:00"}}


def test_merge_nested_replaces_lists_wholesale():
    existing = {"story": [{"title": "A", "content": "a"}, {"title": "B", "content": "b"}]}

    merged = corp_services.merge_nested(existing, {"story": [{"title": "C", "content": "c"}]})

    assert merged["story"] == [{"title": "C", "content": "c"}]


def test_merge_nested_does_not_mutate_inputs():
    existing = {"social": {"twitter": "https://twitter.com/a"}}
    partial = {"social": {"facebook": "https://facebook.com/a"}}

    merged = corp_services.merge_nested(existing, partial)
    merged["social"]["twitter"] = "changed"

    assert existing == {"social": {"twitter": "https://twitter.com/a"}}
    assert partial == {"social": {"facebook": "https://facebook.com/a"}}


# =============================================================================
# 2. 활성 회사 정보 지연 생성
# =============================================================================
@pytest.mark.asyncio
async def test_ensure_active_creates_defaults_once(db_session):
    first = await corp_crud.company.ensure_active(db_session, acting_user_id=None)
    second = await corp_crud.company.ensure_active(db_session, acting_user_id=None)

    assert first.id == second.id
    assert first.name == "ImanPrime"
    assert first.about["story"] == [] and first.about["vision"] == ""
    assert first.social_media["linkedin"] == ""
    count = (await db_session.execute(select(func.count()).select_from(corp_models.Company))).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_ensure_active_recovers_from_concurrent_creation(db_session, monkeypatch):
    """
    다른 요청이 먼저 활성 회사를 만든 경우, 유니크 인덱스 위반 후 기존 행을 다시 읽어 반환합니다.
    """
    existing = await corp_crud.company.ensure_active(db_session, acting_user_id=None)
    existing_id = existing.id  # 경합 처리 중 롤백되면 객체가 만료됩니다.

    real_get_active = corp_crud.company.get_active
    calls = []

    async def stale_first_read(db):
        calls.append(db)
        if len(calls) == 1:
            return None  # 경합에서 진 요청은 처음엔 회사가 없다고 봅니다.
        return await real_get_active(db)

    monkeypatch.setattr(corp_crud.company, "get_active", stale_first_read)

    company = await corp_crud.company.ensure_active(db_session, acting_user_id=None)

    assert company.id == existing_id
    assert len(calls) == 2
    count = (await db_session.execute(select(func.count()).select_from(corp_models.Company))).scalar_one()
    assert count == 1


def test_validate_reports_all_paths():
    values = {
        "name": "",
        "logo": "ftp://example.com/logo.png",
        "about": {"story": [{"title": "", "content": "x"}], "vision": "v" * 1001},
        "contacts": {"emails": [{"email": "not-an-email"}]},
        "social_media": {},
    }

    with pytest.raises(ValidationError) as exc_info:
        corp_crud.company.validate(values)

    fields = {error["field"] for error in exc_info.value.errors}
    assert fields == {"name", "logo", "about.story.0.title", "about.vision", "contacts.emails.0.email"}


# =============================================================================
# 3. 하위 항목 편집기
# =============================================================================
@pytest.mark.asyncio
async def test_sequential_adds_keep_every_member_in_order(db_session, asset_store):
    company = await corp_crud.company.ensure_active(db_session, acting_user_id=None)

    for index in range(5):
        company, member, warnings = await corp_services.team_editor.add_item(
            db_session, asset_store, company, {"name": f"Member {index}", "position": "Agent"}, None, None
        )
        assert warnings == []

    assert [m.name for m in company.team] == [f"Member {index}" for index in range(5)]
    assert [m.seq for m in company.team] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_update_item_unknown_id_does_not_touch_store(db_session, asset_store, png_bytes):
    company = await corp_crud.company.ensure_active(db_session, acting_user_id=None)
    image = ImageUpload(data=png_bytes, filename="x.png", content_type="image/png")

    with pytest.raises(NotFoundError):
        await corp_services.partner_editor.update_item(db_session, asset_store, company, "missing", {}, image, None)

    assert asset_store.uploads == [] and asset_store.deleted == []


@pytest.mark.asyncio
async def test_update_basic_info_with_logo(db_session, asset_store, png_bytes):
    company = await corp_crud.company.ensure_active(db_session, acting_user_id=None)
    update = corp_schemas.BasicInfoUpdate(name="ImanPrime Realty", about=corp_schemas.AboutPatch(mission="M"))
    logo = ImageUpload(data=png_bytes, filename="logo.png", content_type="image/png")

    company, warnings = await corp_services.update_basic_info(db_session, asset_store, company, update, logo, None)

    assert warnings == []
    assert company.name == "ImanPrime Realty"
    assert company.about["mission"] == "M"
    assert company.logo.endswith("company_images/logos/img1.png")
    assert asset_store.deleted == []


@pytest.mark.asyncio
async def test_item_seq_is_unique_per_company(db_session):
    company = await corp_crud.company.ensure_active(db_session, acting_user_id=None)
    db_session.add(corp_models.Partner(id="p1", company_id=company.id, seq=1, name="Acme"))
    await db_session.commit()

    db_session.add(corp_models.Partner(id="p2", company_id=company.id, seq=1, name="Beta"))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_insert_item_retries_when_seq_was_taken(db_session, monkeypatch):
    """
    다른 요청이 먼저 같은 seq를 차지한 경우, 세이브포인트만 되돌리고 다음 seq로 다시 추가합니다.
    """
    company = await corp_crud.company.ensure_active(db_session, acting_user_id=None)
    await corp_crud.company.insert_item(db_session, company, corp_models.TeamMember, {"name": "Ana", "position": "Agent"})

    real_next_seq = corp_crud.CRUDCompany._next_seq
    calls = []

    async def stale_first_seq(self, db, model, company_id):
        calls.append(company_id)
        if len(calls) == 1:
            return 1  # 경합 중에는 이미 사용된 seq를 읽습니다.
        return await real_next_seq(self, db, model, company_id)

    monkeypatch.setattr(corp_crud.CRUDCompany, "_next_seq", stale_first_seq)

    await corp_crud.company.insert_item(db_session, company, corp_models.TeamMember, {"name": "Ben", "position": "Broker"})
    company = await corp_crud.company.commit_and_reload(db_session)

    assert len(calls) == 2
    assert [(m.name, m.seq) for m in company.team] == [("Ana", 1), ("Ben", 2)]


@pytest.mark.asyncio
async def test_insert_item_gives_up_after_repeated_collisions(db_session, monkeypatch):
    company = await corp_crud.company.ensure_active(db_session, acting_user_id=None)
    await corp_crud.company.insert_item(db_session, company, corp_models.Partner, {"name": "Acme"})

    async def always_taken(self, db, model, company_id):
        return 1

    monkeypatch.setattr(corp_crud.CRUDCompany, "_next_seq", always_taken)

    with pytest.raises(IntegrityError):
        await corp_crud.company.insert_item(db_session, company, corp_models.Partner, {"name": "Beta"})


# =============================================================================
# 4. 별도 세션에서의 동시 실행
# =============================================================================
def _session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.mark.asyncio
async def test_concurrent_ensure_active_creates_one_company(concurrent_engine):
    Session = _session_factory(concurrent_engine)

    async def ensure_in_own_session():
        async with Session() as db:
            company = await corp_crud.company.ensure_active(db, acting_user_id=None)
            return company.id

    ids = await asyncio.gather(*(ensure_in_own_session() for _ in range(4)))

    assert len(set(ids)) == 1
    async with Session() as db:
        statement = select(func.count()).select_from(corp_models.Company).where(corp_models.Company.is_active == True)  # noqa: E712
        assert (await db.execute(statement)).scalar_one() == 1


@pytest.mark.asyncio
async def test_concurrent_adds_in_separate_sessions_keep_every_member(concurrent_engine, asset_store):
    Session = _session_factory(concurrent_engine)
    async with Session() as db:
        await corp_crud.company.ensure_active(db, acting_user_id=None)

    async def add_in_own_session(name):
        async with Session() as db:
            company = await corp_crud.company.get_active(db)
            await corp_services.team_editor.add_item(
                db, asset_store, company, {"name": name, "position": "Agent"}, None, None
            )

    names = ["Ana", "Ben", "Cleo"]
    await asyncio.gather(*(add_in_own_session(name) for name in names))

    async with Session() as db:
        company = await corp_crud.company.get_active(db)
        assert sorted(m.name for m in company.team) == names
        assert sorted(m.seq for m in company.team) == [1, 2, 3]
