# realty/domains/blog/crud.py

"""
blog.posts 저장소. 공개 범위 필터, 태그/검색 필터, 조회수/좋아요 증가를 제공합니다.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import String, cast, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.sql.expression import SelectOfScalar

from realty.core.crud_base import CRUDBase
from realty.core.exceptions import ValidationError
from . import models as blog_models
from . import schemas as blog_schemas

Blog = blog_models.Blog

SORT_FIELDS = {
    "publish_date": Blog.publish_date,
    "created_at": Blog.created_at,
    "views": Blog.views,
    "likes": Blog.likes,
    "title": Blog.title,
}

FEATURED_LIMIT = 6


def order_clause(sort: str):
    descending = sort.startswith("-")
    column = SORT_FIELDS.get(sort.lstrip("-"))
    if column is None:
        raise ValidationError(errors=[{"field": "sort", "message": f"Unsupported sort key '{sort}'"}])
    return column.desc() if descending else column.asc()


def published_as_of(now: datetime):
    """공개 게시글 조건: published 상태이고 게시일이 지났습니다."""
    return (Blog.status == blog_models.BlogStatus.PUBLISHED.value) & (Blog.publish_date <= now)


class CRUDBlog(CRUDBase[Blog, blog_schemas.BlogCreate, blog_schemas.BlogUpdate]):
    def __init__(self):
        super().__init__(model=Blog)

    def filtered(
        self,
        *,
        published_before: Optional[datetime] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        tags: Iterable[str] = (),
        search: Optional[str] = None,
        sort: str = "-publish_date",
    ) -> SelectOfScalar[Blog]:
        """
        `published_before`가 주어지면 그 시점에 공개된 게시글만 조회합니다 (status 인자는 무시).
        태그는 하나라도 일치하면 포함합니다.
        """
        statement = select(Blog)
        if published_before is not None:
            statement = statement.where(published_as_of(published_before))
        elif status:
            statement = statement.where(Blog.status == status)
        if category:
            statement = statement.where(Blog.category == category)
        if featured is not None:
            statement = statement.where(Blog.featured == featured)
        tags = [tag.strip().lower() for tag in tags if tag.strip()]
        if tags:
            # JSON 배열을 문자열로 바꿔 '"tag"' 원소를 찾습니다 (SQLite JSON / PostgreSQL JSONB 공통).
            tag_text = cast(Blog.tags, String)
            statement = statement.where(or_(*(tag_text.like(f'%"{tag}"%') for tag in tags)))
        if search:
            pattern = f"%{search}%"
            statement = statement.where(
                or_(Blog.title.ilike(pattern), Blog.excerpt.ilike(pattern), Blog.content.ilike(pattern))
            )
        return statement.order_by(order_clause(sort), Blog.id.desc())

    async def featured_posts(self, db: AsyncSession, now: datetime) -> List[Blog]:
        statement = (
            select(Blog)
            .where(published_as_of(now), Blog.featured == True)  # noqa: E712
            .order_by(Blog.publish_date.desc(), Blog.id.desc())
            .limit(FEATURED_LIMIT)
        )
        result = await db.execute(statement)
        return result.scalars().all()

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Optional[Blog]:
        return await self.get_one_by(db, slug=slug)

    async def slug_taken(self, db: AsyncSession, slug: str) -> bool:
        return await self.get_by_slug(db, slug) is not None

    async def increment(self, db: AsyncSession, blog_id: int, column: str) -> Optional[int]:
        """views/likes 카운터를 DB에서 원자적으로 1 증가시키고 커밋한 뒤 새 값을 반환합니다."""
        counter = getattr(Blog, column)
        result = await db.execute(
            update(Blog)
            .where(Blog.id == blog_id)
            .values({column: counter + 1})
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        if result.rowcount == 0:
            return None
        value = await db.execute(select(counter).where(Blog.id == blog_id))
        return value.scalar_one()


blog = CRUDBlog()
