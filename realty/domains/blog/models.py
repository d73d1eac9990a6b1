# realty/domains/blog/models.py

"""
'blog' 도메인 (PostgreSQL 'blog' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import Index
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship, Column

from realty.core.models import JSONType, TimestampMixin, utcnow
from realty.domains.usr.models import User


class BlogStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Blog(TimestampMixin, table=True):
    """
    blog.posts 테이블.
    slug는 제목에서 만들어지며 제목이 바뀔 때마다 다시 생성됩니다. 태그는 소문자로 저장됩니다.
    """
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_blog_posts_category_status", "category", "status"),
        {'schema': 'blog'},
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="고유 ID")
    title: str = Field(max_length=200, description="제목")
    content: str = Field(description="본문")
    excerpt: str = Field(max_length=300, description="요약")
    image: str = Field(max_length=1024, description="대표 이미지 URL")
    author: str = Field(max_length=100, description="작성자 표시 이름")
    tags: List[str] = Field(
        default_factory=list, sa_column=Column(JSONType, nullable=False, default=list), description="태그 (소문자)"
    )
    category: str = Field(max_length=100, description="분류")
    status: str = Field(default=BlogStatus.DRAFT.value, max_length=20, description="공개 상태")
    publish_date: datetime = Field(
        default_factory=utcnow, sa_type=TIMESTAMP(timezone=True), index=True, description="게시일 (미래면 예약 게시)"
    )
    read_time: int = Field(default=5, ge=1, description="예상 읽기 시간 (분)")
    views: int = Field(default=0, description="조회수")
    likes: int = Field(default=0, description="좋아요 수")
    slug: str = Field(max_length=300, sa_column_kwargs={"unique": True}, description="URL용 식별자")
    featured: bool = Field(default=False, description="추천 게시글 여부")
    created_by_id: Optional[int] = Field(default=None, foreign_key="usr.users.id", description="작성한 관리자 ID")

    created_by: Optional[User] = Relationship(
        sa_relationship_kwargs={"viewonly": True, "lazy": "selectin"}
    )
