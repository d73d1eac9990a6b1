# realty/domains/shared/routers.py

"""
'shared' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

삭제에 실패하여 재시도 대기 중인 원격 이미지 목록을 관리자가 확인할 수 있도록 합니다.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core import dependencies as deps
from realty.domains.usr import models as usr_models

from . import crud as shared_crud
from . import schemas as shared_schemas


router = APIRouter(
    tags=["Shared (시스템 공용정보 관리)"],
    responses={404: {"description": "Not found"}},
)


@router.get("/pending-asset-deletions", response_model=shared_schemas.ApiResponse)
async def read_pending_asset_deletions(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    삭제 재시도 대기 중인 이미지 목록을 조회합니다. (관리자 권한 필요)
    """
    items = await shared_crud.pending_deletion.get_multi(db, skip=skip, limit=limit)
    return shared_schemas.ApiResponse(
        data={
            "pending_deletions": [
                shared_schemas.PendingAssetDeletionRead.model_validate(item).model_dump(mode="json")
                for item in items
            ]
        },
    )
