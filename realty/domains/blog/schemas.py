# realty/domains/blog/schemas.py

"""
'blog' 도메인의 요청/응답 모델입니다. slug, read_time, views, likes는 서버가 관리합니다.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from realty.domains.shared.schemas import StrictModel
from realty.domains.usr.schemas import UserSummary
from .models import BlogStatus


def _normalize_tags(value: List[str]) -> List[str]:
    return [tag.strip().lower() for tag in value if tag and tag.strip()]


Tags = Annotated[List[str], AfterValidator(_normalize_tags)]


class BlogCreate(StrictModel):
    title: str = Field(..., min_length=3, max_length=200)
    content: str = Field(..., min_length=100)
    excerpt: str = Field(..., min_length=10, max_length=300)
    author: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=100)
    tags: Tags = Field(default_factory=list)
    status: BlogStatus = BlogStatus.DRAFT
    publish_date: Optional[datetime] = None
    featured: bool = False


class BlogUpdate(StrictModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    content: Optional[str] = Field(None, min_length=100)
    excerpt: Optional[str] = Field(None, min_length=10, max_length=300)
    author: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[Tags] = None
    status: Optional[BlogStatus] = None
    publish_date: Optional[datetime] = None
    featured: Optional[bool] = None


class BlogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    content: str
    excerpt: str
    image: str
    author: str
    tags: List[str] = Field(default_factory=list)
    category: str
    status: str
    publish_date: datetime
    read_time: int
    views: int
    likes: int
    featured: bool
    created_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
