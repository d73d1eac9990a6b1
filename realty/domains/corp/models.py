# realty/domains/corp/models.py

"""
'corp' 도메인 (PostgreSQL 'corp' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- `Company`: 회사 프로필. `is_active = true`인 행은 부분 유니크 인덱스로 최대 하나만 허용됩니다.
- `TeamMember`, `Partner`: 회사에 소속된 하위 항목. 자체 저장소 없이 CRUDCompany를 통해서만 기록되며,
  `seq` 순서(추가된 순서)로 표시됩니다.

about / contacts / social_media / social_links 같은 중첩 객체는 JSON 컬럼(PostgreSQL에서는 JSONB)에 저장됩니다.
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import Field, Relationship, Column

from realty.core.models import JSONType, TimestampMixin
from realty.domains.usr.models import User


def _new_item_id() -> str:
    return uuid.uuid4().hex


class TeamMember(TimestampMixin, table=True):
    """
    corp.team_members 테이블. 회사 프로필의 팀원 목록 항목입니다.
    """
    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("company_id", "seq", name="uq_team_members_company_seq"),
        {'schema': 'corp'},
    )

    id: str = Field(default_factory=_new_item_id, primary_key=True, max_length=32, description="팀원 고유 ID (hex UUID)")
    company_id: int = Field(foreign_key="corp.companies.id", index=True, description="소속 회사 ID")
    seq: int = Field(default=0, description="표시 순서 (추가될 때마다 증가, 회사 안에서 유일)")
    name: str = Field(max_length=100, description="이름")
    position: str = Field(max_length=100, description="직책")
    phone: Optional[str] = Field(default=None, max_length=50, description="연락처")
    image: Optional[str] = Field(default=None, max_length=1024, description="프로필 이미지 URL")
    social_links: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSONType, nullable=False, default=dict),
        description="소셜 링크 (linkedin, twitter, facebook, instagram)"
    )


class Partner(TimestampMixin, table=True):
    """
    corp.partners 테이블. 회사 프로필의 파트너 목록 항목입니다.
    """
    __tablename__ = "partners"
    __table_args__ = (
        UniqueConstraint("company_id", "seq", name="uq_partners_company_seq"),
        {'schema': 'corp'},
    )

    id: str = Field(default_factory=_new_item_id, primary_key=True, max_length=32, description="파트너 고유 ID (hex UUID)")
    company_id: int = Field(foreign_key="corp.companies.id", index=True, description="소속 회사 ID")
    seq: int = Field(default=0, description="표시 순서 (추가될 때마다 증가, 회사 안에서 유일)")
    name: str = Field(max_length=100, description="파트너명")
    website: Optional[str] = Field(default=None, max_length=1024, description="웹사이트 URL")
    logo: Optional[str] = Field(default=None, max_length=1024, description="로고 이미지 URL")


class Company(TimestampMixin, table=True):
    """
    corp.companies 테이블. 서비스를 운영하는 회사의 프로필입니다.
    """
    __tablename__ = "companies"
    __table_args__ = (
        # 활성 회사 정보는 하나만 존재할 수 있습니다.
        Index(
            "uq_companies_single_active",
            "is_active",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        {'schema': 'corp'},
    )

    id: Optional[int] = Field(default=None, primary_key=True, description="고유 ID")
    name: str = Field(default="ImanPrime", max_length=100, description="회사명")
    logo: Optional[str] = Field(default=None, max_length=1024, description="회사 로고 URL")
    about: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSONType, nullable=False, default=dict),
        description="회사 소개 (story, values, vision, mission)"
    )
    contacts: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSONType, nullable=False, default=dict),
        description="연락처 (addresses, phone_numbers, emails, working_hours)"
    )
    social_media: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSONType, nullable=False, default=dict),
        description="소셜 미디어 URL"
    )
    is_active: bool = Field(default=True, description="활성 회사 정보 여부")
    updated_by_id: Optional[int] = Field(default=None, foreign_key="usr.users.id", description="마지막 수정자 ID")

    # 하위 항목은 CRUDCompany의 대상 지정 INSERT/UPDATE/DELETE로만 기록됩니다.
    team: List[TeamMember] = Relationship(
        sa_relationship_kwargs={
            "viewonly": True,
            "lazy": "selectin",
            "order_by": "(TeamMember.seq, TeamMember.created_at)",
        }
    )
    partners: List[Partner] = Relationship(
        sa_relationship_kwargs={
            "viewonly": True,
            "lazy": "selectin",
            "order_by": "(Partner.seq, Partner.created_at)",
        }
    )
    # GET /company 응답에 마지막 수정자의 요약 정보(id, username, email)를 싣습니다.
    updated_by: Optional[User] = Relationship(
        sa_relationship_kwargs={"viewonly": True, "lazy": "selectin"}
    )
