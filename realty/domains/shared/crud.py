# realty/domains/shared/crud.py

"""
'shared' 도메인의 CRUD 작업을 담당하는 모듈입니다.
"""

from typing import List, Optional
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.crud_base import CRUDBase
from . import models as shared_models
from . import schemas as shared_schemas


class CRUDPendingAssetDeletion(
    CRUDBase[
        shared_models.PendingAssetDeletion,
        shared_schemas.PendingAssetDeletionCreate,
        shared_schemas.PendingAssetDeletionUpdate,
    ]
):
    def __init__(self):
        super().__init__(model=shared_models.PendingAssetDeletion)

    def enqueue(
        self, db: AsyncSession, *, public_id: str, url: Optional[str], error: Optional[str]
    ) -> shared_models.PendingAssetDeletion:
        """
        삭제 대기 행을 세션에 추가합니다. 커밋하지 않으며,
        호출한 작업(회사 정보 저장)의 커밋과 함께 저장됩니다.
        """
        pending = shared_models.PendingAssetDeletion(public_id=public_id, url=url, last_error=error)
        db.add(pending)
        return pending

    async def get_retryable(
        self, db: AsyncSession, *, max_attempts: int, limit: int = 100
    ) -> List[shared_models.PendingAssetDeletion]:
        """재시도 한도에 도달하지 않은 삭제 대기 행을 오래된 순서로 조회합니다."""
        statement = (
            self._select()
            .where(self.model.attempts < max_attempts)
            .order_by(self.model.id)
            .limit(limit)
        )
        result = await db.execute(statement)
        return result.scalars().all()


pending_deletion = CRUDPendingAssetDeletion()
