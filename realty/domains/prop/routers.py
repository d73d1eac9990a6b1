# realty/domains/prop/routers.py

"""
'prop' 도메인 (매물)의 API 엔드포인트를 정의하는 모듈입니다 (/api/v1/properties).

- 공개 조회: 랜딩 페이지 묶음, 필터/페이지 목록, 상세 (조회수 증가).
  비로그인/일반 사용자는 active 매물만 볼 수 있고, 관리자는 상태 필터를 쓸 수 있습니다.
- 관리자: 등록/수정/삭제. 요청은 multipart 폼입니다.
  대표 이미지는 `image`, 갤러리는 `images`(여러 파트), 평면도는 `floor_plans`(여러 파트)로 전달하고
  평면도 이름은 `floor_plan_names`(JSON 배열 또는 쉼표 목록)로 순서대로 지정합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette.datastructures import FormData

from realty.core import dependencies as deps
from realty.core.exceptions import ForbiddenError, ValidationError
from realty.domains.shared.forms import (
    decode_request_form,
    form_file,
    read_image,
    read_images,
    split_list,
)
from realty.domains.shared.schemas import ApiResponse, page_info
from realty.domains.shared.services import PROPERTY_IMAGE, AssetStore
from realty.domains.usr import models as usr_models

from . import crud as prop_crud
from . import schemas as prop_schemas
from . import services as prop_services
from .models import PropertyCategory, PropertyStatus


router = APIRouter(tags=["Property Management (매물 관리)"])

AdminUser = Depends(deps.get_current_admin_user)

_FORM_OPTIONS = dict(
    json_fields=("coordinates",),
    list_fields=("amenities", "property_certifications"),
)


def _card(prop) -> dict:
    return prop_schemas.PropertyCard.model_validate(prop).model_dump(mode="json")


def _dump(prop) -> dict:
    return prop_schemas.PropertyRead.model_validate(prop).model_dump(mode="json")


async def _read_media(form: FormData):
    """대표 이미지, 갤러리, 평면도 파일과 평면도 이름을 읽습니다 (저장소 호출 전 제약 검사 포함)."""
    image = await read_image(form_file(form, "image"), PROPERTY_IMAGE)
    gallery = await read_images(form, "images", PROPERTY_IMAGE, max_count=prop_schemas.MAX_GALLERY_IMAGES)
    floor_plans = await read_images(form, "floor_plans", PROPERTY_IMAGE, max_count=prop_schemas.MAX_FLOOR_PLANS)
    raw_names = form.get("floor_plan_names")
    try:
        names = [str(name) for name in split_list(raw_names)] if isinstance(raw_names, str) else []
    except ValueError as e:
        raise ValidationError(errors=[{"field": "floor_plan_names", "message": str(e)}]) from e
    return image, gallery, floor_plans, names


# =============================================================================
# 1. 공개 조회
# =============================================================================
@router.get("/landing", response_model=ApiResponse, response_model_exclude_none=True, summary="랜딩 페이지 매물")
async def read_landing(db: AsyncSession = Depends(deps.get_db_session)):
    """추천 매물 6건, 최신 매물 8건, 주거/상업/고급 분류별 4건씩."""
    landing = await prop_crud.listing.landing(db)
    return ApiResponse(
        data={
            "featured": [_card(p) for p in landing["featured"]],
            "latest": [_card(p) for p in landing["latest"]],
            "by_category": {
                category: [_card(p) for p in items] for category, items in landing["by_category"].items()
            },
        }
    )


@router.get("/", response_model=ApiResponse, response_model_exclude_none=True, summary="매물 목록")
async def read_properties(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="관리자 전용"),
    category: Optional[PropertyCategory] = None,
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[float] = Query(None, ge=0),
    location: Optional[str] = None,
    search: Optional[str] = Query(None, description="제목/설명/위치 부분 일치"),
    featured: Optional[bool] = None,
    sort: str = Query("-created_at", description="created_at, price, views, title, bedrooms ('-'는 내림차순)"),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: Optional[usr_models.User] = Depends(deps.get_optional_user),
):
    """관리자가 아니면 상태 필터는 무시되고 active 매물만 조회됩니다."""
    if deps.is_admin(current_user):
        effective_status = status_filter.value if status_filter else None
    else:
        effective_status = PropertyStatus.ACTIVE.value
    statement = prop_crud.listing.filtered(
        status=effective_status,
        category=category.value if category else None,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        location=location,
        search=search,
        featured=featured,
        sort=sort,
    )
    properties, total = await prop_crud.listing.paginate(db, statement, page=page, limit=limit)
    return ApiResponse(
        data={
            "properties": [_card(p) for p in properties],
            "pagination": page_info(page, limit, total, total_key="total_properties"),
        }
    )


@router.get("/{property_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="매물 상세")
async def read_property(
    property_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: Optional[usr_models.User] = Depends(deps.get_optional_user),
):
    """active가 아닌 매물은 관리자만 볼 수 있습니다 (그 외 403). 조회할 때마다 조회수가 1 증가합니다."""
    prop = await prop_services.get_property_or_404(db, property_id)
    if prop.status != PropertyStatus.ACTIVE.value and not deps.is_admin(current_user):
        raise ForbiddenError("Property not available")
    await prop_services.record_view(db, prop)
    return ApiResponse(data={"property": _dump(prop)})


# =============================================================================
# 2. 관리자
# =============================================================================
@router.post(
    "/", response_model=ApiResponse, response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED, summary="매물 등록",
)
async def create_property(
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = AdminUser,
):
    """매물을 등록합니다. 대표 이미지(`image`)와 담당 에이전트(`agent_id`)는 필수입니다. (관리자 권한 필요)"""
    create, form = await decode_request_form(request, prop_schemas.PropertyCreate, **_FORM_OPTIONS)
    image, gallery, floor_plans, names = await _read_media(form)
    prop = await prop_services.create_property(
        db, store, create,
        image=image, gallery=gallery, floor_plans=floor_plans, floor_plan_names=names,
        acting_user_id=current_user.id,
    )
    return ApiResponse(message="Property created successfully", data={"property": _dump(prop)})


@router.put("/{property_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="매물 수정")
async def update_property(
    property_id: int,
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    _admin: usr_models.User = AdminUser,
):
    """
    전달된 필드만 수정합니다. amenities / property_certifications / virtual_tour는 빈 값으로 비울 수 있습니다.
    새 갤러리나 평면도 파일이 있으면 해당 목록 전체가 교체됩니다.
    """
    update, form = await decode_request_form(
        request, prop_schemas.PropertyUpdate,
        clearable=("amenities", "property_certifications", "virtual_tour"), **_FORM_OPTIONS,
    )
    image, gallery, floor_plans, names = await _read_media(form)
    prop = await prop_services.get_property_or_404(db, property_id)
    prop, warnings = await prop_services.update_property(
        db, store, prop, update,
        image=image, gallery=gallery, floor_plans=floor_plans, floor_plan_names=names,
    )
    return ApiResponse(
        message="Property updated successfully", data={"property": _dump(prop)}, warnings=warnings or None
    )


@router.delete("/{property_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="매물 삭제")
async def delete_property(
    property_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    _admin: usr_models.User = AdminUser,
):
    prop = await prop_services.get_property_or_404(db, property_id)
    warnings = await prop_services.delete_property(db, store, prop)
    return ApiResponse(message="Property deleted successfully", warnings=warnings or None)
