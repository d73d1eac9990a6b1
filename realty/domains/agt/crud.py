# realty/domains/agt/crud.py

"""
agt.agents 저장소. 목록 필터/정렬, 이메일 중복 검사, 담당 매물 통계를 포함합니다.
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import or_, update
from sqlalchemy.sql import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.sql.expression import SelectOfScalar

from realty.core.crud_base import CRUDBase
from realty.core.exceptions import ValidationError
from realty.domains.prop.models import Property, PropertyStatus
from . import models as agt_models
from . import schemas as agt_schemas

Agent = agt_models.Agent

# 목록 정렬 키 ('-' 접두사는 내림차순)
SORT_FIELDS = {
    "name": Agent.name,
    "experience": Agent.experience,
    "created_at": Agent.created_at,
}


def order_clause(sort: str):
    """`name`, `-experience` 형식의 정렬 키를 ORDER BY 절로 바꿉니다. 알 수 없는 키는 400."""
    descending = sort.startswith("-")
    column = SORT_FIELDS.get(sort.lstrip("-"))
    if column is None:
        raise ValidationError(errors=[{"field": "sort", "message": f"Unsupported sort key '{sort}'"}])
    return column.desc() if descending else column.asc()


class CRUDAgent(CRUDBase[Agent, agt_schemas.AgentCreate, agt_schemas.AgentUpdate]):
    def __init__(self):
        super().__init__(model=Agent)

    def filtered(
        self,
        *,
        specialization: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        sort: str = "name",
    ) -> SelectOfScalar[Agent]:
        statement = select(Agent)
        if specialization:
            statement = statement.where(Agent.specialization == specialization)
        if is_active is not None:
            statement = statement.where(Agent.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            statement = statement.where(
                or_(Agent.name.ilike(pattern), Agent.email.ilike(pattern), Agent.specialization.ilike(pattern))
            )
        return statement.order_by(order_clause(sort), Agent.id)

    async def list_active(self, db: AsyncSession) -> List[Agent]:
        result = await db.execute(
            select(Agent).where(Agent.is_active == True).order_by(Agent.name, Agent.id)  # noqa: E712
        )
        return result.scalars().all()

    async def ensure_email_free(self, db: AsyncSession, email: Optional[str], owner_id: Optional[int] = None) -> None:
        if not email:
            return
        holder = await self.get_one_by(db, email=email)
        if holder is not None and holder.id != owner_id:
            raise ValidationError(errors=[{"field": "email", "message": "Agent with this email already exists"}])

    # --- 담당 매물 ---
    async def property_counts(self, db: AsyncSession, agent_ids: Iterable[int]) -> Dict[int, int]:
        """에이전트별 삭제되지 않은 매물 수"""
        agent_ids = list(agent_ids)
        if not agent_ids:
            return {}
        result = await db.execute(
            select(Property.agent_id, func.count(Property.id))
            .where(Property.agent_id.in_(agent_ids), Property.status != PropertyStatus.DELETED.value)
            .group_by(Property.agent_id)
        )
        return {agent_id: count for agent_id, count in result.all()}

    async def count_active_properties(self, db: AsyncSession, agent_id: int) -> int:
        result = await db.execute(
            select(func.count(Property.id)).where(
                Property.agent_id == agent_id, Property.status == PropertyStatus.ACTIVE.value
            )
        )
        return result.scalar_one()

    async def property_stats(self, db: AsyncSession, agent_id: int) -> Dict[str, int]:
        total = (await self.property_counts(db, [agent_id])).get(agent_id, 0)
        active = await self.count_active_properties(db, agent_id)
        return {"total_properties": total, "active_properties": active}

    async def recent_active_properties(self, db: AsyncSession, agent_id: int, limit: int = 10) -> List[Property]:
        result = await db.execute(
            select(Property)
            .where(Property.agent_id == agent_id, Property.status == PropertyStatus.ACTIVE.value)
            .order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    async def release_properties(self, db: AsyncSession, agent_id: int) -> None:
        """삭제되는 에이전트가 담당하던 (비활성) 매물의 담당자를 비웁니다. 커밋은 호출자가 수행합니다."""
        await db.execute(
            update(Property)
            .where(Property.agent_id == agent_id)
            .values(agent_id=None)
            .execution_options(synchronize_session=False)
        )


agent = CRUDAgent()
