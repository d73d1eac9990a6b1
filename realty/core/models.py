# realty/core/models.py

"""
여러 도메인의 테이블이 공유하는 SQLModel 믹스인과 컬럼 타입입니다.
"""

from typing import Optional
from datetime import datetime, UTC

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import JSON, TIMESTAMP
from sqlmodel import Field, SQLModel

# PostgreSQL에서는 JSONB, 그 외(테스트용 SQLite)에서는 JSON
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(UTC)


class TimestampMixin(SQLModel):
    """
    created_at / updated_at 컬럼.
    상속하는 테이블마다 별도의 Column이 만들어지도록 sa_column 대신 sa_type을 사용합니다.
    """
    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "onupdate": func.now()},
        description="레코드 마지막 업데이트 일시"
    )
