# realty/domains/quote/routers.py

"""
'quote' 도메인의 API 엔드포인트를 정의하는 모듈입니다 (/api/v1/quotes).

- 공개: 견적 요청 제출 (JSON).
- 관리자: 통계, 목록, 상세, 처리 정보 수정, 메모 추가, 삭제.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core import dependencies as deps
from realty.domains.shared.schemas import ApiResponse, page_info
from realty.domains.usr import models as usr_models

from . import crud as quote_crud
from . import schemas as quote_schemas
from . import services as quote_services
from .models import BudgetRange, ProjectType, QuotePriority, QuoteStatus


router = APIRouter(tags=["Quote Requests (견적 요청)"])

AdminUser = Depends(deps.get_current_admin_user)


def _dump(quote) -> dict:
    return quote_schemas.QuoteRequestRead.model_validate(quote).model_dump(mode="json")


def _summary(quote) -> dict:
    return quote_schemas.QuoteRequestSummary.model_validate(quote).model_dump(mode="json")


@router.post(
    "/", response_model=ApiResponse, response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED, summary="견적 요청 제출",
)
async def submit_quote_request(
    create: quote_schemas.QuoteRequestCreate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """로그인 없이 제출할 수 있습니다."""
    quote = await quote_services.submit_quote_request(db, create)
    summary = _summary(quote)
    summary.pop("created_at", None)
    return ApiResponse(
        message="Quote request submitted successfully. We will contact you soon!",
        data={"quote_request": summary},
    )


@router.get("/statistics", response_model=ApiResponse, response_model_exclude_none=True, summary="견적 요청 통계")
async def read_quote_statistics(
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    """상태별 건수, 프로젝트 유형/예산 범위별 건수 (많은 순), 최근 요청 5건."""
    stats = await quote_crud.quote_request.statistics(db)
    stats["recent_requests"] = [_summary(q) for q in stats["recent_requests"]]
    return ApiResponse(data=stats)


@router.get("/", response_model=ApiResponse, response_model_exclude_none=True, summary="견적 요청 목록")
async def read_quote_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[QuoteStatus] = Query(None, alias="status"),
    project_type: Optional[ProjectType] = None,
    budget_range: Optional[BudgetRange] = None,
    priority: Optional[QuotePriority] = None,
    assigned_to: Optional[int] = Query(None, description="담당 에이전트 ID"),
    search: Optional[str] = Query(None, description="이름/이메일/프로젝트 설명 부분 일치"),
    sort: str = Query("-created_at", description="created_at, full_name, status, priority, follow_up_date"),
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    statement = quote_crud.quote_request.filtered(
        status=status_filter.value if status_filter else None,
        project_type=project_type.value if project_type else None,
        budget_range=budget_range.value if budget_range else None,
        priority=priority.value if priority else None,
        assigned_to_id=assigned_to,
        search=search,
        sort=sort,
    )
    quotes, total = await quote_crud.quote_request.paginate(db, statement, page=page, limit=limit)
    return ApiResponse(
        data={
            "quote_requests": [_dump(q) for q in quotes],
            "pagination": page_info(page, limit, total, total_key="total_requests"),
        }
    )


@router.get("/{quote_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="견적 요청 상세")
async def read_quote_request(
    quote_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    quote = await quote_services.get_quote_or_404(db, quote_id)
    return ApiResponse(data={"quote_request": _dump(quote)})


@router.put("/{quote_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="견적 요청 수정")
async def update_quote_request(
    quote_id: int,
    update: quote_schemas.QuoteRequestUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    quote = await quote_services.get_quote_or_404(db, quote_id)
    quote = await quote_services.update_quote_request(db, quote, update)
    return ApiResponse(message="Quote request updated successfully", data={"quote_request": _dump(quote)})


@router.post("/{quote_id}/notes", response_model=ApiResponse, response_model_exclude_none=True, summary="메모 추가")
async def add_quote_note(
    quote_id: int,
    note: quote_schemas.QuoteNoteCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = AdminUser,
):
    quote = await quote_services.get_quote_or_404(db, quote_id)
    quote = await quote_services.add_note(db, quote, note.content, current_user.id)
    return ApiResponse(message="Note added successfully", data={"quote_request": _dump(quote)})


@router.delete("/{quote_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="견적 요청 삭제")
async def delete_quote_request(
    quote_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    quote = await quote_services.get_quote_or_404(db, quote_id)
    await quote_services.delete_quote_request(db, quote)
    return ApiResponse(message="Quote request deleted successfully")
