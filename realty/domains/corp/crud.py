# realty/domains/corp/crud.py

"""
'corp' 도메인의 활성 회사 정보 저장소(Repository) 모듈입니다.

회사 정보는 하위 컬렉션(team, partners)을 가진 애그리거트이므로 CRUDBase를 상속하지 않습니다.
- 활성 회사 정보 조회/지연 생성 (`get_active`, `ensure_active`).
- 전체 애그리거트 검증 후 저장 (`validate`, `save`).
- 하위 항목에 대한 대상 지정 쓰기 (`insert_item`, `update_item`, `remove_item`, `touch`).
  동시에 추가된 팀원/파트너가 서로의 쓰기를 덮어쓰지 않도록 항목 단위 SQL 문장으로만 기록합니다.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Type, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.config import settings
from realty.core.exceptions import AppError, DuplicateActiveError, ValidationError
from . import models as corp_models
from . import schemas as corp_schemas

logger = logging.getLogger(__name__)

ItemModel = Union[Type[corp_models.TeamMember], Type[corp_models.Partner]]


class CRUDCompany:
    # 하위 항목 추가 시 seq 충돌을 다시 시도하는 최대 횟수
    insert_attempts = 5

    def __init__(self):
        self.model = corp_models.Company

    # --- 조회 / 생성 ---
    async def get_active(self, db: AsyncSession) -> Optional[corp_models.Company]:
        """
        활성 회사 정보를 팀원/파트너와 함께 표시 순서대로 조회합니다.
        세션에 이미 로드된 객체도 DB 값으로 다시 채웁니다 (populate_existing).
        """
        statement = (
            select(self.model)
            .where(self.model.is_active == True)  # noqa: E712
            .options(
                selectinload(self.model.team),
                selectinload(self.model.partners),
                selectinload(self.model.updated_by),
            )
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def create_active(self, db: AsyncSession, *, acting_user_id: Optional[int]) -> corp_models.Company:
        """
        기본값으로 활성 회사 정보를 생성합니다.
        이미 활성 행이 있으면 부분 유니크 인덱스 위반으로 DuplicateActiveError가 발생합니다.
        """
        company = corp_models.Company(
            name=settings.DEFAULT_COMPANY_NAME,
            about=corp_schemas.About().model_dump(mode="json"),
            contacts=corp_schemas.Contacts().model_dump(mode="json"),
            social_media=corp_schemas.SocialMedia().model_dump(mode="json"),
            is_active=True,
            updated_by_id=acting_user_id,
        )
        db.add(company)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise DuplicateActiveError() from e
        return await self.get_active(db)

    async def ensure_active(self, db: AsyncSession, *, acting_user_id: Optional[int]) -> corp_models.Company:
        """
        활성 회사 정보를 반환하고, 없으면 생성합니다.
        동시 생성 경합에서 진 요청은 롤백 후 한 번 다시 조회합니다.
        """
        company = await self.get_active(db)
        if company is not None:
            return company
        try:
            company = await self.create_active(db, acting_user_id=acting_user_id)
            logger.info("활성 회사 정보 생성: id=%s", company.id)
            return company
        except DuplicateActiveError:
            logger.info("활성 회사 정보 동시 생성 감지, 다시 조회합니다.")
            company = await self.get_active(db)
            if company is None:
                raise AppError("Could not load the active company profile")
            return company

    # --- 검증 / 저장 ---
    def document_values(self, company: corp_models.Company) -> Dict[str, Any]:
        """저장된 스칼라/중첩 필드를 기본값이 채워진 dict로 반환합니다."""
        return corp_schemas.CompanyDocument.model_construct(
            name=company.name,
            logo=company.logo,
            about=corp_schemas.About.model_validate(company.about or {}),
            contacts=corp_schemas.Contacts.model_validate(company.contacts or {}),
            social_media=corp_schemas.SocialMedia.model_validate(company.social_media or {}),
        ).model_dump(mode="json")

    def validate(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        애그리거트 전체 값을 검증합니다.
        위반된 모든 필드를 ValidationError.errors에 담아 한 번에 보고합니다.
        """
        try:
            document = corp_schemas.CompanyDocument.model_validate(values)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)
        return document.model_dump(mode="json")

    async def save(
        self, db: AsyncSession, company: corp_models.Company, *, acting_user_id: Optional[int] = None
    ) -> corp_models.Company:
        """
        스칼라/중첩 필드를 검증한 뒤 행 전체를 교체 저장하고, 다시 로드한 애그리거트를 반환합니다.
        """
        values = self.validate({
            "name": company.name,
            "logo": company.logo,
            "about": company.about,
            "contacts": company.contacts,
            "social_media": company.social_media,
        })
        for key, value in values.items():
            setattr(company, key, value)
        if acting_user_id is not None:
            company.updated_by_id = acting_user_id
        db.add(company)
        return await self.commit_and_reload(db)

    async def commit_and_reload(self, db: AsyncSession) -> corp_models.Company:
        await db.commit()
        company = await self.get_active(db)
        if company is None:
            raise AppError("Active company profile disappeared during update")
        return company

    # --- 하위 항목 대상 지정 쓰기 (커밋은 호출자가 수행) ---
    async def _next_seq(self, db: AsyncSession, model: ItemModel, company_id: int) -> int:
        result = await db.execute(
            select(func.coalesce(func.max(model.seq), 0) + 1).where(model.company_id == company_id)
        )
        return result.scalar_one()

    async def insert_item(
        self, db: AsyncSession, company: corp_models.Company, model: ItemModel, values: Dict[str, Any]
    ) -> str:
        """
        새 항목을 목록의 맨 뒤(seq = 현재 최대값 + 1)에 추가하고 새 ID를 반환합니다.
        동시에 추가된 항목이 같은 seq를 먼저 차지하면 (company_id, seq) 유니크 제약 위반이 나므로,
        세이브포인트만 되돌리고 seq를 다시 계산합니다.
        """
        company_id = company.id
        item_id = uuid.uuid4().hex
        for attempt in range(1, self.insert_attempts + 1):
            seq = await self._next_seq(db, model, company_id)
            try:
                async with db.begin_nested():
                    await db.execute(
                        insert(model).values(id=item_id, company_id=company_id, seq=seq, **values)
                    )
                return item_id
            except IntegrityError:
                if attempt == self.insert_attempts:
                    raise
                logger.info("%s seq=%s 충돌, 다시 시도합니다 (%s회)", model.__tablename__, seq, attempt)

    async def update_item(
        self, db: AsyncSession, company: corp_models.Company, model: ItemModel, item_id: str, values: Dict[str, Any]
    ) -> bool:
        """전달된 필드만 UPDATE 합니다. 대상 행이 없으면 False."""
        statement = (
            update(model)
            .where(model.id == item_id, model.company_id == company.id)
            .values(updated_at=func.now(), **values)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(statement)
        return result.rowcount > 0

    async def remove_item(
        self, db: AsyncSession, company: corp_models.Company, model: ItemModel, item_id: str
    ) -> bool:
        """항목 하나를 삭제합니다. 나머지 항목의 순서는 유지됩니다. 대상 행이 없으면 False."""
        statement = (
            delete(model)
            .where(model.id == item_id, model.company_id == company.id)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(statement)
        return result.rowcount > 0

    async def touch(self, db: AsyncSession, company: corp_models.Company, *, acting_user_id: Optional[int]) -> None:
        """루트 행의 updated_by / updated_at만 갱신합니다."""
        statement = (
            update(self.model)
            .where(self.model.id == company.id)
            .values(updated_by_id=acting_user_id, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        await db.execute(statement)


company = CRUDCompany()
