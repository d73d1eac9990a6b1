# realty/domains/agt/schemas.py

"""
'agt' 도메인 (에이전트)의 요청/응답 모델입니다.

- `AgentCreate` / `AgentUpdate`: multipart 폼을 디코딩한 결과. 수정은 전달된 필드만 반영합니다.
- `AgentRead`: 상세/목록 응답. `AgentOption`: 선택 목록용 요약. `AgentBrief`: 매물 응답에 포함되는 담당자 정보.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator

from realty.domains.shared.schemas import EmptyIfNone, OptionalUrl, StrictModel
from realty.domains.usr.schemas import UserSummary
from .models import Specialization


# =============================================================================
# 1. 중첩 구조
# =============================================================================
class Certification(StrictModel):
    name: str = Field(..., min_length=1, max_length=200)
    issued_by: Optional[str] = Field(None, max_length=200)
    issued_date: Optional[date] = None
    expiry_date: Optional[date] = None


class AgentSocialMedia(StrictModel):
    linkedin: OptionalUrl = ""
    twitter: OptionalUrl = ""
    facebook: OptionalUrl = ""
    instagram: OptionalUrl = ""
    website: OptionalUrl = ""


class Availability(StrictModel):
    start: Optional[str] = Field(None, max_length=20)
    end: Optional[str] = Field(None, max_length=20)
    available: bool = True


def _day_off() -> Availability:
    return Availability(available=False)


class AgentWorkingHours(StrictModel):
    """주말은 기본적으로 근무하지 않습니다."""
    monday: Availability = Field(default_factory=Availability)
    tuesday: Availability = Field(default_factory=Availability)
    wednesday: Availability = Field(default_factory=Availability)
    thursday: Availability = Field(default_factory=Availability)
    friday: Availability = Field(default_factory=Availability)
    saturday: Availability = Field(default_factory=_day_off)
    sunday: Availability = Field(default_factory=_day_off)


class Rating(StrictModel):
    average: float = Field(0, ge=0, le=5)
    total_reviews: int = Field(0, ge=0)


def _clean_languages(value: List[str]) -> List[str]:
    return [language.strip() for language in value if language and language.strip()]


Languages = Annotated[List[str], AfterValidator(_clean_languages)]


# =============================================================================
# 2. 요청 스키마
# =============================================================================
class AgentCreate(StrictModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    whatsapp_number: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=1000)
    specialization: Specialization = Specialization.RESIDENTIAL
    experience: int = Field(0, ge=0)
    languages: Languages = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    social_media: AgentSocialMedia = Field(default_factory=AgentSocialMedia)
    working_hours: AgentWorkingHours = Field(default_factory=AgentWorkingHours)
    rating: Rating = Field(default_factory=Rating)
    is_active: bool = True

    @field_validator("email", mode="after")
    @classmethod
    def lower_case_email(cls, value: str) -> str:
        return value.lower()


class AgentUpdate(StrictModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    whatsapp_number: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=1000)
    specialization: Optional[Specialization] = None
    experience: Optional[int] = Field(None, ge=0)
    languages: Optional[Languages] = None
    certifications: Optional[List[Certification]] = None
    social_media: Optional[AgentSocialMedia] = None
    working_hours: Optional[AgentWorkingHours] = None
    rating: Optional[Rating] = None
    is_active: Optional[bool] = None

    @field_validator("email", mode="after")
    @classmethod
    def lower_case_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


# =============================================================================
# 3. 응답 스키마
# =============================================================================
class AgentOption(BaseModel):
    """GET /agents/active 항목 (선택 목록용)"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    specialization: str


class AgentBrief(BaseModel):
    """매물 응답에 포함되는 담당 에이전트 정보"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    whatsapp_number: EmptyIfNone = ""
    image: EmptyIfNone = ""
    specialization: str


class AgentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    whatsapp_number: EmptyIfNone = ""
    image: EmptyIfNone = ""
    bio: EmptyIfNone = ""
    specialization: str
    experience: int = 0
    languages: List[str] = Field(default_factory=list)
    certifications: List[Dict[str, Any]] = Field(default_factory=list)
    social_media: AgentSocialMedia = Field(default_factory=AgentSocialMedia)
    working_hours: AgentWorkingHours = Field(default_factory=AgentWorkingHours)
    rating: Rating = Field(default_factory=Rating)
    is_active: bool
    created_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("social_media", "working_hours", "rating", mode="before")
    @classmethod
    def empty_to_defaults(cls, value):
        return value or {}
