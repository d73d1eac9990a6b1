# realty/domains/usr/schemas.py

"""
'usr' 도메인 API의 요청/응답 모델입니다.
응답 모델에는 password_hash가 포함되지 않습니다.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, ConfigDict, EmailStr

from . import models as usr_models


# =============================================================================
# 1. 계정
# =============================================================================
class UserBase(SQLModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: Optional[EmailStr] = Field(None, max_length=100)
    full_name: Optional[str] = Field(None, max_length=100)
    role: usr_models.UserRole = Field(default=usr_models.UserRole.GENERAL_USER, description="계정 역할")
    is_active: bool = True


class UserCreate(UserBase):
    """관리자가 계정을 만들 때의 입력 (비밀번호 8자 이상)"""
    password: str = Field(..., min_length=8)


class UserUpdate(SQLModel):
    """부분 수정 입력. 지정하지 않은 필드는 유지됩니다."""
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, max_length=100)
    role: Optional[usr_models.UserRole] = None
    is_active: Optional[bool] = None


class UserRead(UserBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserSummary(BaseModel):
    """다른 도메인 응답에 포함되는 작성자/수정자 요약 (updated_by, created_by, added_by)"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: Optional[str] = None


# =============================================================================
# 2. 토큰
# =============================================================================
class Token(BaseModel):
    """POST /auth/token 응답 (OAuth2 password 흐름 형식)"""
    access_token: str
    token_type: str = "bearer"
