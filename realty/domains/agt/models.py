# realty/domains/agt/models.py

"""
'agt' 도메인 (PostgreSQL 'agt' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

languages / certifications / social_media / working_hours / rating 같은 중첩 값은 JSON 컬럼에 저장됩니다.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from sqlmodel import Field, Relationship, Column

from realty.core.models import JSONType, TimestampMixin
from realty.domains.usr.models import User


class Specialization(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    LUXURY = "luxury"
    RENTAL = "rental"
    INVESTMENT = "investment"
    INTERIOR_DESIGN = "interior-design"
    EXTERIOR_DESIGN = "exterior-design"


class Agent(TimestampMixin, table=True):
    """
    agt.agents 테이블. 이메일은 소문자로 저장되며 유일합니다.
    """
    __tablename__ = "agents"
    __table_args__ = {'schema': 'agt'}

    id: Optional[int] = Field(default=None, primary_key=True, description="고유 ID")
    name: str = Field(max_length=100, index=True, description="이름")
    email: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="이메일 (소문자)")
    phone: str = Field(max_length=50, description="전화번호")
    whatsapp_number: Optional[str] = Field(default=None, max_length=50, description="WhatsApp 번호")
    image: Optional[str] = Field(default=None, max_length=1024, description="프로필 이미지 URL")
    bio: Optional[str] = Field(default=None, max_length=1000, description="소개")
    specialization: str = Field(
        default=Specialization.RESIDENTIAL.value, max_length=30, index=True, description="전문 분야"
    )
    experience: int = Field(default=0, description="경력 (년)")
    languages: List[str] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False, default=list), description="사용 언어"
    )
    certifications: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False, default=list),
        description="자격증 (name, issued_by, issued_date, expiry_date)"
    )
    social_media: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSONType, nullable=False, default=dict), description="소셜 미디어 URL"
    )
    working_hours: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSONType, nullable=False, default=dict),
        description="요일별 근무 시간 (start, end, available)"
    )
    rating: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSONType, nullable=False, default=dict),
        description="평점 (average, total_reviews)"
    )
    is_active: bool = Field(default=True, index=True, description="활성 여부")
    created_by_id: Optional[int] = Field(default=None, foreign_key="usr.users.id", description="등록한 관리자 ID")

    created_by: Optional[User] = Relationship(
        sa_relationship_kwargs={"viewonly": True, "lazy": "selectin"}
    )
