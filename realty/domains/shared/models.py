# realty/domains/shared/models.py

"""
'shared' 도메인 (PostgreSQL 'shared' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

원격 이미지 저장소에서 삭제에 실패한 자산을 기록해 두었다가
ARQ 워커가 재시도할 수 있도록 하는 대기열 테이블을 포함합니다.
"""

from typing import Optional

from sqlmodel import Field, SQLModel

from realty.core.models import TimestampMixin


class PendingAssetDeletionBase(SQLModel):
    public_id: str = Field(max_length=255, index=True, description="원격 저장소의 자산 식별자")
    url: Optional[str] = Field(default=None, max_length=1024, description="삭제 대상 이미지 URL")
    last_error: Optional[str] = Field(default=None, description="마지막 삭제 실패 사유")
    attempts: int = Field(default=1, description="삭제 시도 횟수")


class PendingAssetDeletion(PendingAssetDeletionBase, TimestampMixin, table=True):
    """
    shared.pending_asset_deletions 테이블.
    삭제 실패가 기록된 트랜잭션이 커밋될 때 함께 저장됩니다.
    """
    __tablename__ = "pending_asset_deletions"
    __table_args__ = {'schema': 'shared'}

    id: Optional[int] = Field(default=None, primary_key=True, description="고유 ID")
