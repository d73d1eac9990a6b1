# realty/domains/prop/models.py

"""
'prop' 도메인 (PostgreSQL 'prop' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

갤러리 이미지, 평면도, 편의시설, 인증 목록은 JSON 컬럼에 저장됩니다.
담당 에이전트가 삭제되면 agent_id는 NULL이 됩니다.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import Index
from sqlmodel import Field, Relationship, Column

from realty.core.models import JSONType, TimestampMixin
from realty.domains.agt.models import Agent
from realty.domains.usr.models import User


class PropertyStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


class PropertyCategory(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    LUXURY = "luxury"
    RENTAL = "rental"
    INVESTMENT = "investment"


class Property(TimestampMixin, table=True):
    """
    prop.properties 테이블.
    """
    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_prop_properties_category_status", "category", "status"),
        {'schema': 'prop'},
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="고유 ID")
    title: str = Field(max_length=200, description="제목")
    description: str = Field(max_length=2000, description="설명")
    location: str = Field(max_length=255, index=True, description="위치")
    price: float = Field(index=True, description="가격")
    bedrooms: int = Field(description="침실 수")
    bathrooms: float = Field(description="욕실 수")
    parking: bool = Field(default=False, description="주차 가능 여부")
    area: str = Field(max_length=100, description="면적 (표시용 문자열)")
    image: str = Field(max_length=1024, description="대표 이미지 URL")
    images: List[str] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False, default=list), description="갤러리 이미지 URL"
    )
    floor_plans: List[Dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False, default=list), description="평면도 (name, image)"
    )
    amenities: List[str] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False, default=list), description="편의시설"
    )
    property_certifications: List[str] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False, default=list), description="매물 인증 (최대 20개)"
    )
    status: str = Field(default=PropertyStatus.DRAFT.value, max_length=20, description="공개 상태")
    category: str = Field(max_length=20, description="분류")
    virtual_tour: str = Field(default="", max_length=1024, description="가상 투어 URL")
    featured: bool = Field(default=False, description="추천 매물 여부")
    views: int = Field(default=0, description="조회수")
    coordinates: Optional[Dict[str, Any]] = Field(
        default=None, sa_column=Column(JSONType, nullable=True), description="좌표 (lat, lng)"
    )
    agent_id: Optional[int] = Field(
        default=None, foreign_key="agt.agents.id", ondelete="SET NULL", index=True, description="담당 에이전트 ID"
    )
    created_by_id: Optional[int] = Field(default=None, foreign_key="usr.users.id", description="등록한 관리자 ID")

    agent: Optional[Agent] = Relationship(
        sa_relationship_kwargs={"viewonly": True, "lazy": "selectin"}
    )
    created_by: Optional[User] = Relationship(
        sa_relationship_kwargs={"viewonly": True, "lazy": "selectin"}
    )
