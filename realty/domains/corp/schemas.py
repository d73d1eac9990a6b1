# realty/domains/corp/schemas.py

"""
'corp' 도메인 (회사 프로필)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.

- 중첩 구조 (about, contacts, social_media, social_links): 알 수 없는 키는 거부합니다.
- `*Document`: 저장 직전 전체 애그리거트/항목 검증에 사용하는 스키마.
- `*Patch`, `*Update`: 부분 업데이트용 스키마 (모든 필드 선택, 전달된 필드만 병합).
- `*Read`: 응답 스키마.
"""

from enum import Enum
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from realty.domains.shared.schemas import EmptyIfNone, OptionalUrl, StrictModel as _Strict
from realty.domains.usr.schemas import UserSummary


# =============================================================================
# 1. 중첩 구조 (about / contacts / social_media)
# =============================================================================
class StoryItem(_Strict):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)


class ValueItem(_Strict):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)


class About(_Strict):
    story: List[StoryItem] = Field(default_factory=list)
    values: List[ValueItem] = Field(default_factory=list)
    vision: str = Field("", max_length=1000)
    mission: str = Field("", max_length=1000)


class AddressType(str, Enum):
    MAIN = "main"
    BRANCH = "branch"
    OFFICE = "office"


class PhoneType(str, Enum):
    MAIN = "main"
    SALES = "sales"
    SUPPORT = "support"
    EMERGENCY = "emergency"


class EmailType(str, Enum):
    GENERAL = "general"
    SALES = "sales"
    SUPPORT = "support"
    CAREERS = "careers"


class Address(_Strict):
    type: AddressType = AddressType.MAIN
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: str = Field("USA", max_length=100)


class PhoneNumber(_Strict):
    type: PhoneType = PhoneType.MAIN
    number: Optional[str] = Field(None, max_length=50)
    label: Optional[str] = Field(None, max_length=100)


class EmailContact(_Strict):
    type: EmailType = EmailType.GENERAL
    email: Optional[EmailStr] = None
    label: Optional[str] = Field(None, max_length=100)

    @field_validator("email", mode="after")
    @classmethod
    def lower_case_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class DayHours(_Strict):
    open: Optional[str] = Field(None, max_length=20)
    close: Optional[str] = Field(None, max_length=20)


class WorkingHours(_Strict):
    monday: DayHours = Field(default_factory=DayHours)
    tuesday: DayHours = Field(default_factory=DayHours)
    wednesday: DayHours = Field(default_factory=DayHours)
    thursday: DayHours = Field(default_factory=DayHours)
    friday: DayHours = Field(default_factory=DayHours)
    saturday: DayHours = Field(default_factory=DayHours)
    sunday: DayHours = Field(default_factory=DayHours)


class Contacts(_Strict):
    addresses: List[Address] = Field(default_factory=list)
    phone_numbers: List[PhoneNumber] = Field(default_factory=list)
    emails: List[EmailContact] = Field(default_factory=list)
    working_hours: WorkingHours = Field(default_factory=WorkingHours)


class SocialMedia(_Strict):
    facebook: OptionalUrl = ""
    twitter: OptionalUrl = ""
    instagram: OptionalUrl = ""
    linkedin: OptionalUrl = ""
    youtube: OptionalUrl = ""


class SocialLinks(_Strict):
    linkedin: OptionalUrl = ""
    twitter: OptionalUrl = ""
    facebook: OptionalUrl = ""
    instagram: OptionalUrl = ""


# --- 부분 업데이트용 (전달된 키만 병합, 리스트는 통째로 교체) ---
class AboutPatch(_Strict):
    story: Optional[List[StoryItem]] = None
    values: Optional[List[ValueItem]] = None
    vision: Optional[str] = Field(None, max_length=1000)
    mission: Optional[str] = Field(None, max_length=1000)


class DayHoursPatch(_Strict):
    open: Optional[str] = Field(None, max_length=20)
    close: Optional[str] = Field(None, max_length=20)


class WorkingHoursPatch(_Strict):
    monday: Optional[DayHoursPatch] = None
    tuesday: Optional[DayHoursPatch] = None
    wednesday: Optional[DayHoursPatch] = None
    thursday: Optional[DayHoursPatch] = None
    friday: Optional[DayHoursPatch] = None
    saturday: Optional[DayHoursPatch] = None
    sunday: Optional[DayHoursPatch] = None


class ContactsPatch(_Strict):
    addresses: Optional[List[Address]] = None
    phone_numbers: Optional[List[PhoneNumber]] = None
    emails: Optional[List[EmailContact]] = None
    working_hours: Optional[WorkingHoursPatch] = None


# SocialMedia/SocialLinks는 모든 필드에 기본값이 있으므로
# model_dump(exclude_unset=True)로 전달된 키만 추출하여 부분 업데이트에 그대로 사용합니다.
SocialMediaPatch = SocialMedia
SocialLinksPatch = SocialLinks


# =============================================================================
# 2. 저장 전 전체 검증 스키마
# =============================================================================
class CompanyDocument(_Strict):
    """회사 애그리거트의 스칼라/중첩 필드 전체. 위반된 모든 필드 경로를 보고합니다."""
    name: str = Field(..., min_length=1, max_length=100)
    logo: OptionalUrl = None
    about: About = Field(default_factory=About)
    contacts: Contacts = Field(default_factory=Contacts)
    social_media: SocialMedia = Field(default_factory=SocialMedia)


class TeamMemberDocument(_Strict):
    name: str = Field(..., min_length=1, max_length=100)
    position: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    image: OptionalUrl = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)


class PartnerDocument(_Strict):
    name: str = Field(..., min_length=1, max_length=100)
    website: OptionalUrl = None
    logo: OptionalUrl = None


# =============================================================================
# 3. 요청 스키마 (multipart 폼 필드를 디코딩한 결과)
# =============================================================================
class BasicInfoUpdate(_Strict):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    about: Optional[AboutPatch] = None
    social_media: Optional[SocialMediaPatch] = None
    contacts: Optional[ContactsPatch] = None


class CompanyInfoUpdate(_Strict):
    """
    PUT /company JSON 본문. about은 저장된 값과 병합하고,
    name / social_media / contacts는 전달되면 통째로 교체합니다.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    about: Optional[AboutPatch] = None
    social_media: Optional[SocialMedia] = None
    contacts: Optional[Contacts] = None


class TeamMemberCreate(_Strict):
    name: str = Field(..., min_length=1, max_length=100)
    position: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    social_links: SocialLinks = Field(default_factory=SocialLinks)


class TeamMemberUpdate(_Strict):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    social_links: Optional[SocialLinksPatch] = None


class PartnerCreate(_Strict):
    name: str = Field(..., min_length=1, max_length=100)
    website: OptionalUrl = None


class PartnerUpdate(_Strict):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    website: OptionalUrl = None


# =============================================================================
# 4. 응답 스키마
# =============================================================================
class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    position: str
    phone: EmptyIfNone = ""
    image: EmptyIfNone = ""
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PartnerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    website: EmptyIfNone = ""
    logo: EmptyIfNone = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    logo: EmptyIfNone = ""
    about: About = Field(default_factory=About)
    contacts: Contacts = Field(default_factory=Contacts)
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    team: List[TeamMemberRead] = Field(default_factory=list)
    partners: List[PartnerRead] = Field(default_factory=list)
    is_active: bool
    updated_by_id: Optional[int] = None
    updated_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
