# realty/domains/corp/routers.py

"""
'corp' 도메인 (회사 프로필)의 API 엔드포인트를 정의하는 모듈입니다.

- 공개 조회: 회사 정보 전체, 연락처, 팀원, 파트너.
- 관리자 수정: JSON 일괄 수정, 기본 정보(로고 포함), 팀원/파트너 추가/수정/삭제 (이미지 포함).

일괄 수정(PUT /)은 JSON 본문을, 나머지 수정 요청은 multipart 폼을 받으며, about / social_media / contacts / social_links는
JSON 문자열로 전달됩니다. 모든 응답은 공통 엔벨로프(ApiResponse) 형식입니다.
"""

from typing import Any, Dict, Optional, Type

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from pydantic import BaseModel
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core import dependencies as deps
from realty.core.exceptions import NotFoundError
from realty.domains.shared.forms import decode_form, read_image, sent_fields
from realty.domains.shared.schemas import ApiResponse
from realty.domains.shared.services import COMPANY_LOGO, AssetStore
from realty.domains.usr import models as usr_models

from . import crud as corp_crud
from . import schemas as corp_schemas
from . import services as corp_services


router = APIRouter(
    tags=["Company Profile Management (회사 프로필 관리)"],
    responses={404: {"description": "Not found"}},
)


async def _get_active_or_404(db: AsyncSession):
    company = await corp_crud.company.get_active(db)
    if company is None:
        raise NotFoundError("Company not found")
    return company


def _dump(schema: Type[BaseModel], obj) -> Dict[str, Any]:
    return schema.model_validate(obj).model_dump(mode="json")


# =============================================================================
# 1. 공개 조회 엔드포인트
# =============================================================================
@router.get("/", response_model=ApiResponse, response_model_exclude_none=True, summary="회사 정보 조회")
async def read_company(db: AsyncSession = Depends(deps.get_db_session)):
    """
    활성 회사 정보를 팀원, 파트너와 함께 조회합니다. 없으면 404입니다.
    """
    company = await corp_crud.company.get_active(db)
    if company is None:
        raise NotFoundError("Company information not found")
    return ApiResponse(data={"company": _dump(corp_schemas.CompanyRead, company)})


@router.get("/contacts", response_model=ApiResponse, response_model_exclude_none=True, summary="회사 연락처 조회")
async def read_company_contacts(db: AsyncSession = Depends(deps.get_db_session)):
    company = await corp_crud.company.get_active(db)
    if company is None:
        raise NotFoundError("Company contact information not found")
    read = corp_schemas.CompanyRead.model_validate(company).model_dump(mode="json")
    return ApiResponse(
        data={
            "contacts": read["contacts"],
            "social_media": read["social_media"],
            "company_name": company.name,
        }
    )


@router.get("/team", response_model=ApiResponse, response_model_exclude_none=True, summary="팀원 목록 조회")
async def read_company_team(db: AsyncSession = Depends(deps.get_db_session)):
    company = await corp_crud.company.get_active(db)
    if company is None:
        raise NotFoundError("Company team information not found")
    return ApiResponse(
        data={
            "team": [_dump(corp_schemas.TeamMemberRead, member) for member in company.team],
            "company_name": company.name,
        }
    )


@router.get("/partners", response_model=ApiResponse, response_model_exclude_none=True, summary="파트너 목록 조회")
async def read_company_partners(db: AsyncSession = Depends(deps.get_db_session)):
    company = await corp_crud.company.get_active(db)
    if company is None:
        raise NotFoundError("Company partners information not found")
    return ApiResponse(
        data={
            "partners": [_dump(corp_schemas.PartnerRead, partner) for partner in company.partners],
            "company_name": company.name,
        }
    )


# =============================================================================
# 2. 회사 기본 정보 수정 (관리자)
# =============================================================================
@router.put("/", response_model=ApiResponse, response_model_exclude_none=True, summary="회사 정보 일괄 수정 (JSON)")
async def update_company_info(
    update: corp_schemas.CompanyInfoUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    JSON 본문으로 회사 정보를 수정합니다. (관리자 권한 필요)
    about은 저장된 값과 병합되고, name / social_media / contacts는 전달된 값으로 교체됩니다.
    이미지는 다루지 않으며, 로고는 `/basic-info`로 수정합니다.
    """
    acting_user_id = current_user.id  # ensure_active가 롤백하면 current_user는 만료됩니다.
    company = await corp_crud.company.ensure_active(db, acting_user_id=acting_user_id)
    company = await corp_services.update_company_info(db, company, update, acting_user_id)
    return ApiResponse(
        message="Company information updated successfully",
        data={"company": _dump(corp_schemas.CompanyRead, company)},
    )


@router.put("/basic-info", response_model=ApiResponse, response_model_exclude_none=True, summary="회사 기본 정보 수정")
async def update_company_basic_info(
    request: Request,
    name: Optional[str] = Form(None),
    about: Optional[str] = Form(None, description="JSON 객체 (story, values, vision, mission)"),
    social_media: Optional[str] = Form(None, description="JSON 객체"),
    contacts: Optional[str] = Form(None, description="JSON 객체"),
    logo: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    회사 기본 정보를 수정합니다. (관리자 권한 필요)
    전달된 필드만 반영하며, 중첩 객체는 저장된 값과 병합됩니다.
    활성 회사 정보가 없으면 기본값으로 먼저 생성합니다.
    """
    update = decode_form(
        corp_schemas.BasicInfoUpdate,
        await sent_fields(request, name=name, about=about, social_media=social_media, contacts=contacts),
        json_fields=("about", "social_media", "contacts"),
    )
    new_logo = await read_image(logo, COMPANY_LOGO)

    acting_user_id = current_user.id  # ensure_active가 롤백하면 current_user는 만료됩니다.
    company = await corp_crud.company.ensure_active(db, acting_user_id=acting_user_id)
    company, warnings = await corp_services.update_basic_info(
        db, store, company, update, new_logo, acting_user_id
    )
    return ApiResponse(
        message="Company basic information updated successfully",
        data={"company": _dump(corp_schemas.CompanyRead, company)},
        warnings=warnings or None,
    )


# =============================================================================
# 3. 팀원 관리 (관리자)
# =============================================================================
@router.post(
    "/team", response_model=ApiResponse, response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED, summary="팀원 추가",
)
async def add_team_member(
    request: Request,
    name: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    social_links: Optional[str] = Form(None, description="JSON 객체 (linkedin, twitter, facebook, instagram)"),
    member_image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    팀원을 목록 맨 뒤에 추가합니다. (관리자 권한 필요)
    """
    create = decode_form(
        corp_schemas.TeamMemberCreate,
        await sent_fields(request, name=name, position=position, phone=phone, social_links=social_links),
        json_fields=("social_links",),
    )
    new_image = await read_image(member_image, corp_services.team_editor.constraints)

    acting_user_id = current_user.id  # ensure_active가 롤백하면 current_user는 만료됩니다.
    company = await corp_crud.company.ensure_active(db, acting_user_id=acting_user_id)
    company, member, warnings = await corp_services.team_editor.add_item(
        db, store, company, create.model_dump(mode="json"), new_image, acting_user_id
    )
    return ApiResponse(
        message="Team member added successfully",
        data={"member": _dump(corp_schemas.TeamMemberRead, member)},
        warnings=warnings or None,
    )


@router.put("/team/{member_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="팀원 수정")
async def update_team_member(
    member_id: str,
    request: Request,
    name: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    social_links: Optional[str] = Form(None, description="JSON 객체 (전달된 키만 병합)"),
    member_image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    팀원 정보를 수정합니다. (관리자 권한 필요)
    새 이미지가 첨부되면 업로드 후 이전 이미지를 삭제합니다.
    """
    update = decode_form(
        corp_schemas.TeamMemberUpdate,
        await sent_fields(request, name=name, position=position, phone=phone, social_links=social_links),
        json_fields=("social_links",),
    )
    new_image = await read_image(member_image, corp_services.team_editor.constraints)

    company = await _get_active_or_404(db)
    company, member, warnings = await corp_services.team_editor.update_item(
        db, store, company, member_id, update.model_dump(exclude_unset=True, mode="json"), new_image, current_user.id
    )
    return ApiResponse(
        message="Team member updated successfully",
        data={"member": _dump(corp_schemas.TeamMemberRead, member)},
        warnings=warnings or None,
    )


@router.delete("/team/{member_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="팀원 삭제")
async def delete_team_member(
    member_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    팀원과 프로필 이미지를 삭제합니다. (관리자 권한 필요)
    """
    company = await _get_active_or_404(db)
    company, warnings = await corp_services.team_editor.delete_item(
        db, store, company, member_id, current_user.id
    )
    return ApiResponse(message="Team member deleted successfully", warnings=warnings or None)


# =============================================================================
# 4. 파트너 관리 (관리자)
# =============================================================================
@router.post(
    "/partners", response_model=ApiResponse, response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED, summary="파트너 추가",
)
async def add_partner(
    request: Request,
    name: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    partner_logo: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    파트너를 목록 맨 뒤에 추가합니다. (관리자 권한 필요)
    """
    create = decode_form(
        corp_schemas.PartnerCreate, await sent_fields(request, name=name, website=website)
    )
    new_logo = await read_image(partner_logo, corp_services.partner_editor.constraints)

    acting_user_id = current_user.id  # ensure_active가 롤백하면 current_user는 만료됩니다.
    company = await corp_crud.company.ensure_active(db, acting_user_id=acting_user_id)
    company, partner, warnings = await corp_services.partner_editor.add_item(
        db, store, company, create.model_dump(mode="json"), new_logo, acting_user_id
    )
    return ApiResponse(
        message="Partner added successfully",
        data={"partner": _dump(corp_schemas.PartnerRead, partner)},
        warnings=warnings or None,
    )


@router.put("/partners/{partner_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="파트너 수정")
async def update_partner(
    partner_id: str,
    request: Request,
    name: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    partner_logo: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    파트너 정보를 수정합니다. (관리자 권한 필요)
    """
    update = decode_form(
        corp_schemas.PartnerUpdate, await sent_fields(request, name=name, website=website)
    )
    new_logo = await read_image(partner_logo, corp_services.partner_editor.constraints)

    company = await _get_active_or_404(db)
    company, partner, warnings = await corp_services.partner_editor.update_item(
        db, store, company, partner_id, update.model_dump(exclude_unset=True, mode="json"), new_logo, current_user.id
    )
    return ApiResponse(
        message="Partner updated successfully",
        data={"partner": _dump(corp_schemas.PartnerRead, partner)},
        warnings=warnings or None,
    )


@router.delete("/partners/{partner_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="파트너 삭제")
async def delete_partner(
    partner_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    파트너와 로고 이미지를 삭제합니다. (관리자 권한 필요)
    """
    company = await _get_active_or_404(db)
    company, warnings = await corp_services.partner_editor.delete_item(
        db, store, company, partner_id, current_user.id
    )
    return ApiResponse(message="Partner deleted successfully", warnings=warnings or None)
