# realty/core/security.py

"""
인증/인가 유틸리티 모듈입니다.

- bcrypt 비밀번호 해시 (passlib)
- HS256 JWT 발급/검증 (python-jose). `sub` 클레임에 사용자명을 담습니다.
- 요청의 Bearer 토큰으로 현재 사용자를 찾는 FastAPI 의존성과 관리자 권한 검사
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from realty import API_PREFIX
from realty.core.config import settings
from realty.core.database import get_session
from realty.core.exceptions import AuthError, ForbiddenError
from realty.domains.usr import models as usr_models

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 토큰이 없을 때 FastAPI 기본 401 대신 AuthError 엔벨로프를 돌려주기 위해 auto_error=False
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/usr/auth/token", auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    `data`에 발급 시각(iat)과 만료 시각(exp)을 더해 서명한 토큰을 반환합니다.
    만료 기간을 지정하지 않으면 ACCESS_TOKEN_EXPIRE_MINUTES를 사용합니다.
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def _token_subject(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.debug("JWT 검증 실패: %s", e)
        raise AuthError("Invalid or expired token")
    subject = payload.get("sub")
    if not subject:
        raise AuthError()
    return subject


async def get_current_user_from_token(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_session),
) -> usr_models.User:
    """
    Bearer 토큰의 사용자를 반환합니다.
    토큰 누락, 서명 오류/만료, 삭제된 사용자는 모두 AuthError(401)입니다.
    """
    if not token:
        raise AuthError("Access denied. No token provided.")
    username = _token_subject(token)

    result = await db.execute(select(usr_models.User).where(usr_models.User.username == username))
    user = result.scalars().one_or_none()
    if user is None:
        raise AuthError()
    return user


def get_current_active_user(
    current_user: usr_models.User = Depends(get_current_user_from_token),
) -> usr_models.User:
    """비활성화된 계정의 토큰은 거부합니다 (401)."""
    if not current_user.is_active:
        raise AuthError("Invalid token or user not active.")
    return current_user


def get_current_admin_user(
    current_user: usr_models.User = Depends(get_current_active_user),
) -> usr_models.User:
    """회사 정보 수정 등 관리자 전용 엔드포인트의 인가 검사 (그 외 역할은 403)."""
    if current_user.role != usr_models.UserRole.ADMIN:
        logger.info("관리자 권한 없음: user=%s role=%s", current_user.username, current_user.role.name)
        raise ForbiddenError("Access denied. Admin privileges required.")
    return current_user


async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_session),
) -> Optional[usr_models.User]:
    """
    공개 조회 엔드포인트용. 토큰이 없으면 None(비로그인)을 반환합니다.
    토큰이 전달되었지만 잘못되었거나 비활성 계정이면 401입니다.
    """
    if not token:
        return None
    user = await get_current_user_from_token(token, db)
    return get_current_active_user(user)


def is_admin(user: Optional[usr_models.User]) -> bool:
    return user is not None and user.role == usr_models.UserRole.ADMIN
