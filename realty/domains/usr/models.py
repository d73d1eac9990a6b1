# realty/domains/usr/models.py

"""
'usr' 도메인 (PostgreSQL 'usr' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

회사 정보(corp)의 `updated_by_id`가 참조하는 사용자 계정과
역할 기반 접근 제어(RBAC)에 사용되는 역할 Enum을 포함합니다.
"""

from typing import Optional
from enum import IntEnum

from sqlmodel import Field

from realty.core.models import TimestampMixin


class UserRole(IntEnum):
    """
    사용자 역할. DB에는 정수 값으로 저장되며, 값이 작을수록 권한이 큽니다.
    """
    ADMIN = 10              # 회사 정보를 수정할 수 있는 관리자
    AGENT = 50              # 부동산 중개인
    GENERAL_USER = 100      # 일반 사용자


class User(TimestampMixin, table=True):
    """
    usr.users 테이블. 로그인 계정과 역할을 저장합니다.
    """
    __tablename__ = "users"
    __table_args__ = {'schema': 'usr'}

    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    username: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="로그인 사용자명")
    password_hash: str = Field(max_length=255, description="bcrypt 비밀번호 해시")
    email: Optional[str] = Field(default=None, max_length=100, sa_column_kwargs={"unique": True}, description="이메일")
    full_name: Optional[str] = Field(default=None, max_length=100, description="표시 이름")
    role: UserRole = Field(default=UserRole.GENERAL_USER, description="역할 (권한)")
    is_active: bool = Field(default=True, description="계정 활성 여부 (비활성 계정의 토큰은 거부됩니다)")
