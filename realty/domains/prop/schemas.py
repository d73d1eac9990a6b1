# realty/domains/prop/schemas.py

"""
'prop' 도메인 (매물)의 요청/응답 모델입니다.

이미지 URL(image, images, floor_plans)은 업로드 결과로만 채워지므로 요청 스키마에 없습니다.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from realty.domains.agt.schemas import AgentBrief
from realty.domains.shared.schemas import EmptyIfNone, OptionalUrl, StrictModel
from realty.domains.usr.schemas import UserSummary
from .models import PropertyCategory, PropertyStatus

MAX_GALLERY_IMAGES = 10
MAX_FLOOR_PLANS = 5
MAX_CERTIFICATIONS = 20


def _clean_items(value: List[str]) -> List[str]:
    return [item.strip() for item in value if item and item.strip()]


TextList = Annotated[List[str], AfterValidator(_clean_items)]
CertificationList = Annotated[List[str], AfterValidator(_clean_items), Field(max_length=MAX_CERTIFICATIONS)]


class Coordinates(StrictModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class FloorPlan(BaseModel):
    name: str
    image: str


# =============================================================================
# 1. 요청 스키마
# =============================================================================
class PropertyCreate(StrictModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    location: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    parking: bool = False
    area: str = Field(..., min_length=1, max_length=100)
    agent_id: int
    category: PropertyCategory
    status: PropertyStatus = PropertyStatus.DRAFT
    amenities: TextList = Field(default_factory=list)
    property_certifications: CertificationList = Field(default_factory=list)
    virtual_tour: OptionalUrl = ""
    featured: bool = False
    coordinates: Optional[Coordinates] = None


class PropertyUpdate(StrictModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=10, max_length=2000)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    parking: Optional[bool] = None
    area: Optional[str] = Field(None, min_length=1, max_length=100)
    agent_id: Optional[int] = None
    category: Optional[PropertyCategory] = None
    status: Optional[PropertyStatus] = None
    amenities: Optional[TextList] = None
    property_certifications: Optional[CertificationList] = None
    virtual_tour: OptionalUrl = None
    featured: Optional[bool] = None
    coordinates: Optional[Coordinates] = None


# =============================================================================
# 2. 응답 스키마
# =============================================================================
class PropertyCard(BaseModel):
    """목록/랜딩 페이지용 요약"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    price: float
    location: str
    image: str
    bedrooms: int
    bathrooms: float
    area: str
    category: str
    status: str
    featured: bool
    agent: Optional[AgentBrief] = None
    created_at: Optional[datetime] = None


class PropertyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    location: str
    price: float
    bedrooms: int
    bathrooms: float
    parking: bool
    area: str
    image: str
    images: List[str] = Field(default_factory=list)
    floor_plans: List[FloorPlan] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    property_certifications: List[str] = Field(default_factory=list)
    status: str
    category: str
    virtual_tour: EmptyIfNone = ""
    featured: bool
    views: int
    coordinates: Optional[Coordinates] = None
    agent_id: Optional[int] = None
    agent: Optional[AgentBrief] = None
    created_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
