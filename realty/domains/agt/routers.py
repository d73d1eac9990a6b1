# realty/domains/agt/routers.py

"""
'agt' 도메인 (에이전트)의 API 엔드포인트를 정의하는 모듈입니다 (/api/v1/agents).

- 공개 조회: 활성 에이전트 선택 목록, 필터/페이지 목록, 상세 (담당 매물 통계 포함).
- 관리자: 등록/수정/삭제. 요청은 multipart 폼이며 프로필 이미지는 `image` 파트로 전달됩니다.
  languages는 JSON 배열 또는 쉼표 목록, certifications는 JSON 배열,
  social_media / working_hours / rating은 JSON 객체 문자열입니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core import dependencies as deps
from realty.domains.prop.schemas import PropertyCard
from realty.domains.shared.forms import decode_request_form, form_file, read_image
from realty.domains.shared.schemas import ApiResponse, page_info
from realty.domains.shared.services import AGENT_IMAGE, AssetStore
from realty.domains.usr import models as usr_models

from . import crud as agt_crud
from . import schemas as agt_schemas
from . import services as agt_services
from .models import Specialization


router = APIRouter(tags=["Agent Management (에이전트 관리)"])

AdminUser = Depends(deps.get_current_admin_user)

_FORM_OPTIONS = dict(
    json_fields=("social_media", "working_hours", "rating"),
    list_fields=("languages", "certifications"),
)


def _dump(agent, **extra) -> dict:
    return {**agt_schemas.AgentRead.model_validate(agent).model_dump(mode="json"), **extra}


# =============================================================================
# 1. 공개 조회
# =============================================================================
@router.get("/active", response_model=ApiResponse, response_model_exclude_none=True, summary="활성 에이전트 목록")
async def read_active_agents(db: AsyncSession = Depends(deps.get_db_session)):
    """매물 등록 화면의 담당자 선택용. 이름순으로 정렬됩니다."""
    agents = await agt_crud.agent.list_active(db)
    return ApiResponse(
        data={"agents": [agt_schemas.AgentOption.model_validate(a).model_dump(mode="json") for a in agents]}
    )


@router.get("/", response_model=ApiResponse, response_model_exclude_none=True, summary="에이전트 목록")
async def read_agents(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    specialization: Optional[Specialization] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = Query(None, description="이름/이메일/전문 분야 부분 일치"),
    sort: str = Query("name", description="name, experience, created_at (내림차순은 '-' 접두사)"),
    db: AsyncSession = Depends(deps.get_db_session),
):
    statement = agt_crud.agent.filtered(
        specialization=specialization.value if specialization else None,
        is_active=is_active,
        search=search,
        sort=sort,
    )
    agents, total = await agt_crud.agent.paginate(db, statement, page=page, limit=limit)
    counts = await agt_crud.agent.property_counts(db, [agent.id for agent in agents])
    return ApiResponse(
        data={
            "agents": [_dump(agent, property_count=counts.get(agent.id, 0)) for agent in agents],
            "pagination": page_info(page, limit, total, total_key="total_agents"),
        }
    )


@router.get("/{agent_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="에이전트 상세")
async def read_agent(agent_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """에이전트 정보와 매물 통계, 최근 활성 매물(최대 10건)을 반환합니다."""
    agent = await agt_services.get_agent_or_404(db, agent_id)
    stats = await agt_crud.agent.property_stats(db, agent_id)
    properties = await agt_crud.agent.recent_active_properties(db, agent_id)
    return ApiResponse(
        data={
            "agent": _dump(agent, stats=stats),
            "properties": [PropertyCard.model_validate(p).model_dump(mode="json") for p in properties],
        }
    )


# =============================================================================
# 2. 관리자
# =============================================================================
@router.post(
    "/", response_model=ApiResponse, response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED, summary="에이전트 등록",
)
async def create_agent(
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = AdminUser,
):
    """에이전트를 등록합니다. 프로필 이미지(`image`)는 필수입니다. (관리자 권한 필요)"""
    create, form = await decode_request_form(request, agt_schemas.AgentCreate, **_FORM_OPTIONS)
    image = await read_image(form_file(form, "image"), AGENT_IMAGE)
    agent = await agt_services.create_agent(db, store, create, image, current_user.id)
    return ApiResponse(message="Agent created successfully", data={"agent": _dump(agent)})


@router.put("/{agent_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="에이전트 수정")
async def update_agent(
    agent_id: int,
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    _admin: usr_models.User = AdminUser,
):
    """전달된 필드만 수정합니다. whatsapp_number / bio / languages는 빈 값으로 비울 수 있습니다."""
    update, form = await decode_request_form(
        request, agt_schemas.AgentUpdate, clearable=("whatsapp_number", "bio", "languages"), **_FORM_OPTIONS
    )
    image = await read_image(form_file(form, "image"), AGENT_IMAGE)
    agent = await agt_services.get_agent_or_404(db, agent_id)
    agent, warnings = await agt_services.update_agent(db, store, agent, update, image)
    return ApiResponse(
        message="Agent updated successfully", data={"agent": _dump(agent)}, warnings=warnings or None
    )


@router.delete("/{agent_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="에이전트 삭제")
async def delete_agent(
    agent_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    _admin: usr_models.User = AdminUser,
):
    agent = await agt_services.get_agent_or_404(db, agent_id)
    warnings = await agt_services.delete_agent(db, store, agent)
    return ApiResponse(message="Agent deleted successfully", warnings=warnings or None)
