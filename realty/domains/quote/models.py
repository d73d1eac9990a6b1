# realty/domains/quote/models.py

"""
'quote' 도메인 (PostgreSQL 'quote' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

견적 요청(requests)과 처리 메모(notes)는 1:N 관계이며, 요청을 삭제하면 메모도 함께 삭제됩니다.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import Index
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship, SQLModel

from realty.core.models import TimestampMixin, utcnow
from realty.domains.agt.models import Agent
from realty.domains.usr.models import User


class ProjectType(str, Enum):
    INTERIOR_DESIGN = "interior-design"
    EXTERIOR_DESIGN = "exterior-design"
    BOTH_INTERIOR_EXTERIOR = "both-interior-exterior"
    RENOVATION = "renovation"
    NEW_CONSTRUCTION = "new-construction"
    COMMERCIAL = "commercial"
    RESIDENTIAL = "residential"


class BudgetRange(str, Enum):
    UNDER_10K = "under-10k"
    FROM_10K_TO_25K = "10k-25k"
    FROM_25K_TO_50K = "25k-50k"
    FROM_50K_TO_100K = "50k-100k"
    FROM_100K_TO_250K = "100k-250k"
    FROM_250K_TO_500K = "250k-500k"
    OVER_500K = "over-500k"


class Timeline(str, Enum):
    ASAP = "asap"
    ONE_TO_THREE_MONTHS = "1-3-months"
    THREE_TO_SIX_MONTHS = "3-6-months"
    SIX_TO_TWELVE_MONTHS = "6-12-months"
    OVER_ONE_YEAR = "over-1-year"
    FLEXIBLE = "flexible"


class QuotePropertyType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    MIXED_USE = "mixed-use"
    OTHER = "other"


class ContactMethod(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    WHATSAPP = "whatsapp"


class QuoteStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    IN_PROGRESS = "in-progress"
    QUOTED = "quoted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class QuotePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class QuoteNote(SQLModel, table=True):
    """quote.notes 테이블. 관리자가 견적 요청 처리 중 남긴 메모."""
    __tablename__ = "notes"
    __table_args__ = {'schema': 'quote'}

    id: Optional[int] = Field(default=None, primary_key=True, description="고유 ID")
    quote_id: int = Field(foreign_key="quote.requests.id", ondelete="CASCADE", index=True, description="견적 요청 ID")
    content: str = Field(max_length=2000, description="메모 내용")
    added_by_id: int = Field(foreign_key="usr.users.id", description="작성한 관리자 ID")
    created_at: Optional[datetime] = Field(
        default_factory=utcnow, sa_type=TIMESTAMP(timezone=True), description="작성 일시"
    )

    added_by: Optional[User] = Relationship(
        sa_relationship_kwargs={"viewonly": True, "lazy": "selectin"}
    )


class QuoteRequest(TimestampMixin, table=True):
    """
    quote.requests 테이블.
    """
    __tablename__ = "requests"
    __table_args__ = (
        Index("ix_quote_requests_status_priority", "status", "priority"),
        {'schema': 'quote'},
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="고유 ID")
    full_name: str = Field(max_length=100, description="요청자 이름")
    email: str = Field(max_length=255, index=True, description="요청자 이메일 (소문자)")
    phone_number: str = Field(max_length=50, description="요청자 전화번호")
    project_type: str = Field(max_length=30, description="프로젝트 유형")
    budget_range: str = Field(max_length=20, description="예산 범위")
    timeline: str = Field(max_length=20, description="희망 일정")
    project_description: str = Field(max_length=2000, description="프로젝트 설명")
    property_type: Optional[str] = Field(default=None, max_length=20, description="건물 유형")
    property_size: Optional[str] = Field(default=None, max_length=100, description="건물 규모")
    preferred_contact_method: str = Field(
        default=ContactMethod.EMAIL.value, max_length=20, description="선호 연락 방법"
    )
    status: str = Field(default=QuoteStatus.NEW.value, max_length=20, index=True, description="처리 상태")
    priority: str = Field(default=QuotePriority.MEDIUM.value, max_length=20, description="우선순위")
    assigned_to_id: Optional[int] = Field(
        default=None, foreign_key="agt.agents.id", ondelete="SET NULL", index=True, description="담당 에이전트 ID"
    )
    follow_up_date: Optional[datetime] = Field(
        default=None, sa_type=TIMESTAMP(timezone=True), description="후속 연락 예정일"
    )
    estimated_quote_amount: Optional[float] = Field(default=None, ge=0, description="예상 견적 금액")

    assigned_to: Optional[Agent] = Relationship(
        sa_relationship_kwargs={"viewonly": True, "lazy": "selectin"}
    )
    notes: List[QuoteNote] = Relationship(
        sa_relationship_kwargs={
            "lazy": "selectin",
            "cascade": "all, delete-orphan",
            "order_by": "QuoteNote.id",
        }
    )
