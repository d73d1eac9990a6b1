# realty/core/crud_base.py

"""
단순 테이블(usr.users, shared.pending_asset_deletions, 매물/에이전트/블로그/견적 요청)용 비동기 CRUD 베이스 클래스입니다.

하위 컬렉션을 가진 회사 정보(corp)는 대상 지정 쓰기가 필요하므로
이 클래스를 상속하지 않고 전용 저장소(CRUDCompany)를 사용합니다.
"""

from typing import Any, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.sql.expression import SelectOfScalar

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    기본키 조회, 필터 목록 조회, 생성, 부분 업데이트를 제공합니다.
    쓰기 메서드는 커밋 후 새로 읽은 객체를 반환합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _select(self, **filters: Any) -> SelectOfScalar[ModelType]:
        """등호 필터가 적용된 SELECT. 모델에 없는 필드명은 ValueError."""
        statement = select(self.model)
        for field, value in filters.items():
            column = getattr(self.model, field, None)
            if column is None:
                raise ValueError(f"{self.model.__name__} has no field '{field}'")
            statement = statement.where(column == value)
        return statement

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        return await db.get(self.model, id)

    async def reload(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        관계 속성(lazy="selectin")까지 DB 값으로 다시 읽습니다.
        세션에 이미 있는 객체도 덮어쓰므로 커밋 직후 응답을 만들 때 사용합니다.
        """
        statement = select(self.model).where(self.model.id == id).execution_options(populate_existing=True)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def get_one_by(self, db: AsyncSession, **filters: Any) -> Optional[ModelType]:
        """필터와 일치하는 단일 레코드 (유니크 컬럼 조회용)."""
        result = await db.execute(self._select(**filters))
        return result.scalar_one_or_none()

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100, **filters: Any
    ) -> List[ModelType]:
        """기본키 순서로 페이지 단위 목록을 조회합니다."""
        statement = self._select(**filters).order_by(self.model.id).offset(skip).limit(limit)
        result = await db.execute(statement)
        return result.scalars().all()

    async def count(self, db: AsyncSession, statement: SelectOfScalar[ModelType]) -> int:
        """필터가 적용된 SELECT의 전체 행 수 (정렬/페이지 조건은 무시)."""
        subquery = statement.order_by(None).limit(None).offset(None).subquery()
        result = await db.execute(select(func.count()).select_from(subquery))
        return result.scalar_one()

    async def paginate(
        self, db: AsyncSession, statement: SelectOfScalar[ModelType], *, page: int, limit: int
    ) -> Tuple[List[ModelType], int]:
        """1부터 시작하는 `page`의 레코드 목록과 전체 건수를 함께 반환합니다."""
        total = await self.count(db, statement)
        result = await db.execute(statement.offset((page - 1) * limit).limit(limit))
        return result.scalars().all(), total

    async def _save(self, db: AsyncSession, db_obj: ModelType) -> ModelType:
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def create(self, db: AsyncSession, *, obj_in: CreateSchemaType) -> ModelType:
        return await self._save(db, self.model.model_validate(obj_in))

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: UpdateSchemaType
    ) -> ModelType:
        """요청에 명시된 필드만 반영합니다 (exclude_unset)."""
        db_obj.sqlmodel_update(obj_in.model_dump(exclude_unset=True))
        return await self._save(db, db_obj)
