# realty/domains/prop/crud.py

"""
prop.properties 저장소. 목록 필터/정렬, 랜딩 페이지 묶음, 조회수 증가를 제공합니다.
"""

from typing import Dict, List, Optional

from sqlalchemy import or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.sql.expression import SelectOfScalar

from realty.core.crud_base import CRUDBase
from realty.core.exceptions import ValidationError
from . import models as prop_models
from . import schemas as prop_schemas

Property = prop_models.Property
PropertyStatus = prop_models.PropertyStatus

SORT_FIELDS = {
    "created_at": Property.created_at,
    "price": Property.price,
    "views": Property.views,
    "title": Property.title,
    "bedrooms": Property.bedrooms,
}

# 랜딩 페이지 구성 (개수)
LANDING_FEATURED = 6
LANDING_LATEST = 8
LANDING_PER_CATEGORY = 4
LANDING_CATEGORIES = ("residential", "commercial", "luxury")


def order_clause(sort: str):
    descending = sort.startswith("-")
    column = SORT_FIELDS.get(sort.lstrip("-"))
    if column is None:
        raise ValidationError(errors=[{"field": "sort", "message": f"Unsupported sort key '{sort}'"}])
    return column.desc() if descending else column.asc()


class CRUDProperty(CRUDBase[Property, prop_schemas.PropertyCreate, prop_schemas.PropertyUpdate]):
    def __init__(self):
        super().__init__(model=Property)

    def filtered(
        self,
        *,
        status: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        bedrooms: Optional[int] = None,
        bathrooms: Optional[float] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        sort: str = "-created_at",
    ) -> SelectOfScalar[Property]:
        """조건이 None인 필터는 적용하지 않습니다. 위치와 검색어는 대소문자를 구분하지 않는 부분 일치입니다."""
        statement = select(Property)
        if status:
            statement = statement.where(Property.status == status)
        if category:
            statement = statement.where(Property.category == category)
        if min_price is not None:
            statement = statement.where(Property.price >= min_price)
        if max_price is not None:
            statement = statement.where(Property.price <= max_price)
        if bedrooms is not None:
            statement = statement.where(Property.bedrooms == bedrooms)
        if bathrooms is not None:
            statement = statement.where(Property.bathrooms == bathrooms)
        if location:
            statement = statement.where(Property.location.ilike(f"%{location}%"))
        if search:
            pattern = f"%{search}%"
            statement = statement.where(
                or_(
                    Property.title.ilike(pattern),
                    Property.description.ilike(pattern),
                    Property.location.ilike(pattern),
                )
            )
        if featured is not None:
            statement = statement.where(Property.featured == featured)
        return statement.order_by(order_clause(sort), Property.id.desc())

    async def _newest_active(self, db: AsyncSession, limit: int, *conditions) -> List[Property]:
        statement = (
            select(Property)
            .where(Property.status == PropertyStatus.ACTIVE.value, *conditions)
            .order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
        )
        result = await db.execute(statement)
        return result.scalars().all()

    async def landing(self, db: AsyncSession) -> Dict[str, object]:
        """공개 랜딩 페이지: 추천 매물, 최신 매물, 주요 분류별 매물 (모두 active, 최신순)"""
        featured = await self._newest_active(db, LANDING_FEATURED, Property.featured == True)  # noqa: E712
        latest = await self._newest_active(db, LANDING_LATEST)
        by_category = {
            category: await self._newest_active(db, LANDING_PER_CATEGORY, Property.category == category)
            for category in LANDING_CATEGORIES
        }
        return {"featured": featured, "latest": latest, "by_category": by_category}

    async def increment_views(self, db: AsyncSession, property_id: int) -> None:
        """조회수를 DB에서 원자적으로 1 증가시키고 커밋합니다."""
        await db.execute(
            update(Property)
            .where(Property.id == property_id)
            .values(views=Property.views + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()


listing = CRUDProperty()
