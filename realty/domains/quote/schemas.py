# realty/domains/quote/schemas.py

"""
'quote' 도메인의 요청/응답 모델입니다.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from realty.domains.agt.schemas import AgentBrief
from realty.domains.shared.schemas import StrictModel
from realty.domains.usr.schemas import UserSummary
from .models import (
    BudgetRange,
    ContactMethod,
    ProjectType,
    QuotePriority,
    QuotePropertyType,
    QuoteStatus,
    Timeline,
)


# =============================================================================
# 1. 요청 스키마
# =============================================================================
class QuoteRequestCreate(StrictModel):
    """공개 견적 요청 양식"""
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone_number: str = Field(..., min_length=1, max_length=50)
    project_type: ProjectType
    budget_range: BudgetRange
    timeline: Timeline
    project_description: str = Field(..., min_length=10, max_length=2000)
    property_type: Optional[QuotePropertyType] = None
    property_size: Optional[str] = Field(None, max_length=100)
    preferred_contact_method: ContactMethod = ContactMethod.EMAIL

    @field_validator("email")
    @classmethod
    def lower_case_email(cls, value: str) -> str:
        return value.lower()


class QuoteRequestUpdate(StrictModel):
    """관리자 처리 정보 수정. assigned_to_id를 null로 보내면 담당자가 해제됩니다."""
    status: Optional[QuoteStatus] = None
    priority: Optional[QuotePriority] = None
    assigned_to_id: Optional[int] = None
    follow_up_date: Optional[datetime] = None
    estimated_quote_amount: Optional[float] = Field(None, ge=0)
    property_type: Optional[QuotePropertyType] = None
    property_size: Optional[str] = Field(None, max_length=100)
    preferred_contact_method: Optional[ContactMethod] = None


class QuoteNoteCreate(StrictModel):
    content: Optional[str] = Field(None, max_length=2000)


# =============================================================================
# 2. 응답 스키마
# =============================================================================
class QuoteNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    added_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None


class QuoteRequestSummary(BaseModel):
    """제출 확인 응답과 통계의 최근 요청 목록용"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    project_type: str
    status: str
    created_at: Optional[datetime] = None


class QuoteRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: str
    phone_number: str
    project_type: str
    budget_range: str
    timeline: str
    project_description: str
    property_type: Optional[str] = None
    property_size: Optional[str] = None
    preferred_contact_method: str
    status: str
    priority: str
    assigned_to_id: Optional[int] = None
    assigned_to: Optional[AgentBrief] = None
    follow_up_date: Optional[datetime] = None
    estimated_quote_amount: Optional[float] = None
    notes: List[QuoteNoteRead] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
