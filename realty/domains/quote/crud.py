# realty/domains/quote/crud.py

"""
quote.requests / quote.notes 저장소. 관리자 목록 필터와 통계 집계를 제공합니다.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.sql.expression import SelectOfScalar

from realty.core.crud_base import CRUDBase
from realty.core.exceptions import ValidationError
from . import models as quote_models
from . import schemas as quote_schemas

QuoteRequest = quote_models.QuoteRequest
QuoteStatus = quote_models.QuoteStatus

SORT_FIELDS = {
    "created_at": QuoteRequest.created_at,
    "full_name": QuoteRequest.full_name,
    "status": QuoteRequest.status,
    "priority": QuoteRequest.priority,
    "follow_up_date": QuoteRequest.follow_up_date,
}

RECENT_LIMIT = 5


def order_clause(sort: str):
    descending = sort.startswith("-")
    column = SORT_FIELDS.get(sort.lstrip("-"))
    if column is None:
        raise ValidationError(errors=[{"field": "sort", "message": f"Unsupported sort key '{sort}'"}])
    return column.desc() if descending else column.asc()


class CRUDQuoteRequest(CRUDBase[QuoteRequest, quote_schemas.QuoteRequestCreate, quote_schemas.QuoteRequestUpdate]):
    def __init__(self):
        super().__init__(model=QuoteRequest)

    def filtered(
        self,
        *,
        status: Optional[str] = None,
        project_type: Optional[str] = None,
        budget_range: Optional[str] = None,
        priority: Optional[str] = None,
        assigned_to_id: Optional[int] = None,
        search: Optional[str] = None,
        sort: str = "-created_at",
    ) -> SelectOfScalar[QuoteRequest]:
        statement = select(QuoteRequest)
        if status:
            statement = statement.where(QuoteRequest.status == status)
        if project_type:
            statement = statement.where(QuoteRequest.project_type == project_type)
        if budget_range:
            statement = statement.where(QuoteRequest.budget_range == budget_range)
        if priority:
            statement = statement.where(QuoteRequest.priority == priority)
        if assigned_to_id is not None:
            statement = statement.where(QuoteRequest.assigned_to_id == assigned_to_id)
        if search:
            pattern = f"%{search}%"
            statement = statement.where(
                or_(
                    QuoteRequest.full_name.ilike(pattern),
                    QuoteRequest.email.ilike(pattern),
                    QuoteRequest.project_description.ilike(pattern),
                )
            )
        return statement.order_by(order_clause(sort), QuoteRequest.id.desc())

    async def _count_where(self, db: AsyncSession, *conditions) -> int:
        result = await db.execute(select(func.count()).select_from(QuoteRequest).where(*conditions))
        return result.scalar_one()

    async def _group_counts(self, db: AsyncSession, column) -> List[Dict[str, Any]]:
        """값별 건수 (건수 내림차순, 같으면 값 오름차순)"""
        count = func.count().label("count")
        result = await db.execute(select(column, count).group_by(column).order_by(count.desc(), column))
        return [{"value": value, "count": total} for value, total in result.all()]

    async def statistics(self, db: AsyncSession) -> Dict[str, Any]:
        overview = {
            "total": await self._count_where(db),
            "new": await self._count_where(db, QuoteRequest.status == QuoteStatus.NEW.value),
            "in_progress": await self._count_where(db, QuoteRequest.status == QuoteStatus.IN_PROGRESS.value),
            "completed": await self._count_where(db, QuoteRequest.status == QuoteStatus.COMPLETED.value),
        }
        recent = await db.execute(
            select(QuoteRequest).order_by(QuoteRequest.created_at.desc(), QuoteRequest.id.desc()).limit(RECENT_LIMIT)
        )
        return {
            "overview": overview,
            "project_types": await self._group_counts(db, QuoteRequest.project_type),
            "budget_ranges": await self._group_counts(db, QuoteRequest.budget_range),
            "recent_requests": recent.scalars().all(),
        }


quote_request = CRUDQuoteRequest()
