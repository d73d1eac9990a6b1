# realty/domains/usr/routers.py

"""
사용자 계정 API (/api/v1/usr).

- POST /auth/token: OAuth2 password 흐름. Swagger UI 등 OAuth2 클라이언트가 읽을 수 있도록
  `{access_token, token_type}`을 엔벨로프 없이 반환합니다.
- /users: 관리자 전용 계정 관리. 성공 응답은 UserRead 모델 그대로, 오류는 공통 엔벨로프로 반환됩니다.
"""

from typing import List

from fastapi import APIRouter, Depends, status, Query
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core import dependencies as deps
from realty.core.exceptions import AuthError, NotFoundError

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas


router = APIRouter(tags=["User Management (사용자 관리)"])

AdminUser = Depends(deps.get_current_admin_user)


async def _get_user_or_404(db: AsyncSession, user_id: int) -> usr_models.User:
    user = await usr_crud.user.get(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


# =============================================================================
# 1. 인증
# =============================================================================
@router.post("/auth/token", response_model=usr_schemas.Token, summary="Access Token 발급")
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(deps.get_db_session),
):
    user = await usr_crud.user.authenticate(db, username=form_data.username, password=form_data.password)
    if user is None:
        raise AuthError("Incorrect username or password")
    if not user.is_active:
        raise AuthError("Inactive user")
    return usr_schemas.Token(access_token=deps.create_access_token(data={"sub": user.username}))


@router.get("/auth/me", response_model=usr_schemas.UserRead, summary="내 계정 정보")
async def read_users_me(current_user: usr_models.User = Depends(deps.get_current_active_user)):
    return current_user


# =============================================================================
# 2. 계정 관리 (관리자)
# =============================================================================
@router.post("/users", response_model=usr_schemas.UserRead, status_code=status.HTTP_201_CREATED, summary="계정 생성")
async def create_user(
    user_in: usr_schemas.UserCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    return await usr_crud.user.create(db, obj_in=user_in)


@router.get("/users", response_model=List[usr_schemas.UserRead], summary="계정 목록")
async def read_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    return await usr_crud.user.get_multi(db, skip=skip, limit=limit)


@router.get("/users/{user_id}", response_model=usr_schemas.UserRead, summary="계정 조회")
async def read_user(
    user_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    return await _get_user_or_404(db, user_id)


@router.put("/users/{user_id}", response_model=usr_schemas.UserRead, summary="계정 수정")
async def update_user(
    user_id: int,
    user_in: usr_schemas.UserUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    _admin: usr_models.User = AdminUser,
):
    """
    역할/활성 여부/연락처를 수정합니다.
    관리자 계정은 강등하거나 비활성화할 수 없습니다 (400).
    """
    user = await _get_user_or_404(db, user_id)
    return await usr_crud.user.update(db, db_obj=user, obj_in=user_in)
