# realty/domains/corp/services.py

"""
'corp' 도메인의 비즈니스 로직 모듈입니다.

- `merge_nested`: 중첩 객체 부분 병합 (건드리지 않은 하위 필드 보존).
- `update_basic_info`: 회사명, about, social_media, contacts, 로고 수정 (multipart 폼).
- `update_company_info`: JSON 본문 일괄 수정 (about 병합, 나머지 교체).
- `NestedCollectionEditor`: 팀원/파트너 목록의 항목 추가/수정/삭제 (이미지 교체 포함).

이미지 처리 순서는 항상 '검증 → 새 이미지 업로드(실패 시 중단) → 이전 이미지 삭제(실패 시 경고) → 저장'입니다.
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.exceptions import NotFoundError, ValidationError
from realty.domains.shared.services import (
    PARTNER_LOGO,
    COMPANY_LOGO,
    TEAM_IMAGE,
    AssetStore,
    ImageConstraints,
    ImageUpload,
    collect_warnings,
    discard_asset,
    upload_image,
)
from . import crud as corp_crud
from . import models as corp_models
from . import schemas as corp_schemas

logger = logging.getLogger(__name__)


def merge_nested(existing: Any, partial: Any) -> Any:
    """
    `partial`을 `existing` 위에 재귀적으로 병합한 새 값을 반환합니다.

    - 양쪽이 모두 매핑이면 키 단위로 병합하고, `partial`에 없는 키는 그대로 둡니다.
    - 그 외의 값(리스트 포함)은 `partial`의 값으로 통째로 교체합니다.
    - 입력값은 변경하지 않습니다. `merge_nested(x, {}) == x`.
    """
    if not isinstance(existing, Mapping) or not isinstance(partial, Mapping):
        return copy.deepcopy(partial)
    merged = copy.deepcopy(dict(existing))
    for key, value in partial.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_nested(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


async def update_basic_info(
    db: AsyncSession,
    store: AssetStore,
    company: corp_models.Company,
    update: corp_schemas.BasicInfoUpdate,
    new_logo: Optional[ImageUpload],
    acting_user_id: Optional[int],
) -> Tuple[corp_models.Company, List[str]]:
    """
    회사 기본 정보를 수정합니다.
    name은 교체, about / social_media / contacts는 저장된 하위 객체와 각각 병합합니다.
    병합 결과는 이미지 저장소 호출 전에 검증됩니다.
    """
    values = corp_crud.company.document_values(company)
    partial = update.model_dump(exclude_unset=True, mode="json")
    if partial.get("name") is not None:
        values["name"] = partial["name"]
    for group in ("about", "social_media", "contacts"):
        if partial.get(group) is not None:
            values[group] = merge_nested(values[group], partial[group])
    values = corp_crud.company.validate(values)

    warnings: List[str] = []
    asset = None
    if new_logo is not None:
        asset = await upload_image(store, new_logo, COMPANY_LOGO)
        cleanup = await discard_asset(db, store, company.logo)
        warnings.extend(collect_warnings(cleanup))
        values["logo"] = asset.url

    for key, value in values.items():
        setattr(company, key, value)
    try:
        company = await corp_crud.company.save(db, company, acting_user_id=acting_user_id)
    except Exception:
        await db.rollback()
        if asset is not None:
            await discard_asset(None, store, asset.url)
        raise
    logger.info("회사 기본 정보 수정: user_id=%s, logo_changed=%s", acting_user_id, asset is not None)
    return company, warnings


async def update_company_info(
    db: AsyncSession,
    company: corp_models.Company,
    update: corp_schemas.CompanyInfoUpdate,
    acting_user_id: Optional[int],
) -> corp_models.Company:
    """
    JSON 본문으로 회사 정보를 일괄 수정합니다 (PUT /company).
    about만 저장된 값과 병합하고, name / social_media / contacts는 전달된 값으로 교체합니다.
    """
    values = corp_crud.company.document_values(company)
    sent = {key for key in update.model_fields_set if getattr(update, key) is not None}
    if "name" in sent:
        values["name"] = update.name
    for key in ("social_media", "contacts"):
        if key in sent:
            values[key] = getattr(update, key).model_dump(mode="json")
    if "about" in sent:
        values["about"] = merge_nested(values["about"], update.about.model_dump(exclude_unset=True, mode="json"))

    for key, value in values.items():
        setattr(company, key, value)
    try:
        company = await corp_crud.company.save(db, company, acting_user_id=acting_user_id)
    except Exception:
        await db.rollback()
        raise
    logger.info("회사 정보 일괄 수정: user_id=%s, fields=%s", acting_user_id, sorted(sent))
    return company


class NestedCollectionEditor:
    """
    회사 애그리거트에 포함된 컬렉션(팀원, 파트너)의 항목 편집기.

    항목은 CRUDCompany의 대상 지정 쓰기로만 저장되며,
    `image_field`에 담긴 이미지는 항목 교체/삭제 시 원격 저장소에서 함께 정리됩니다.
    """

    def __init__(
        self,
        model: corp_crud.ItemModel,
        *,
        collection: str,
        image_field: str,
        constraints: ImageConstraints,
        document: Type[BaseModel],
        label: str,
    ):
        self.model = model
        self.collection = collection
        self.image_field = image_field
        self.constraints = constraints
        self.document = document
        self.label = label

    def find(self, company: corp_models.Company, item_id: str):
        return next((item for item in getattr(company, self.collection) if item.id == item_id), None)

    def _validate(self, values: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self.document.model_validate(values).model_dump(mode="json")
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)

    def _current_values(self, item) -> Dict[str, Any]:
        return {name: copy.deepcopy(getattr(item, name)) for name in self.document.model_fields}

    async def add_item(
        self,
        db: AsyncSession,
        store: AssetStore,
        company: corp_models.Company,
        fields: Dict[str, Any],
        new_image: Optional[ImageUpload],
        acting_user_id: Optional[int],
    ):
        """새 항목을 목록 맨 뒤에 추가합니다. (company, item, warnings)를 반환합니다."""
        values = self._validate(fields)
        asset = None
        if new_image is not None:
            asset = await upload_image(store, new_image, self.constraints)
            values[self.image_field] = asset.url

        try:
            item_id = await corp_crud.company.insert_item(db, company, self.model, values)
            await corp_crud.company.touch(db, company, acting_user_id=acting_user_id)
            company = await corp_crud.company.commit_and_reload(db)
        except Exception:
            await db.rollback()
            if asset is not None:
                await discard_asset(None, store, asset.url)
            raise

        logger.info("%s 추가: id=%s", self.label, item_id)
        return company, self.find(company, item_id), []

    async def update_item(
        self,
        db: AsyncSession,
        store: AssetStore,
        company: corp_models.Company,
        item_id: str,
        partial: Dict[str, Any],
        new_image: Optional[ImageUpload],
        acting_user_id: Optional[int],
    ):
        """
        전달된 필드만 덮어쓰고(social_links 등 중첩 객체는 병합) 나머지는 유지합니다.
        (company, item, warnings)를 반환합니다.
        """
        item = self.find(company, item_id)
        if item is None:
            raise NotFoundError(f"{self.label} not found")

        values = self._validate(merge_nested(self._current_values(item), partial))
        changed = {key: values[key] for key in partial}

        warnings: List[str] = []
        asset = None
        if new_image is not None:
            asset = await upload_image(store, new_image, self.constraints)
            cleanup = await discard_asset(db, store, getattr(item, self.image_field))
            warnings.extend(collect_warnings(cleanup))
            changed[self.image_field] = asset.url

        try:
            updated = await corp_crud.company.update_item(db, company, self.model, item_id, changed)
            if not updated:
                raise NotFoundError(f"{self.label} not found")
            await corp_crud.company.touch(db, company, acting_user_id=acting_user_id)
            company = await corp_crud.company.commit_and_reload(db)
        except Exception:
            await db.rollback()
            if asset is not None:
                await discard_asset(None, store, asset.url)
            raise

        logger.info("%s 수정: id=%s, fields=%s", self.label, item_id, sorted(changed))
        return company, self.find(company, item_id), warnings

    async def delete_item(
        self,
        db: AsyncSession,
        store: AssetStore,
        company: corp_models.Company,
        item_id: str,
        acting_user_id: Optional[int],
    ):
        """항목과 그 이미지를 삭제합니다. (company, warnings)를 반환합니다."""
        item = self.find(company, item_id)
        if item is None:
            raise NotFoundError(f"{self.label} not found")

        cleanup = await discard_asset(db, store, getattr(item, self.image_field))
        warnings = collect_warnings(cleanup)

        removed = await corp_crud.company.remove_item(db, company, self.model, item_id)
        if not removed:
            await db.rollback()
            raise NotFoundError(f"{self.label} not found")
        await corp_crud.company.touch(db, company, acting_user_id=acting_user_id)
        company = await corp_crud.company.commit_and_reload(db)

        logger.info("%s 삭제: id=%s", self.label, item_id)
        return company, warnings


team_editor = NestedCollectionEditor(
    corp_models.TeamMember,
    collection="team",
    image_field="image",
    constraints=TEAM_IMAGE,
    document=corp_schemas.TeamMemberDocument,
    label="Team member",
)

partner_editor = NestedCollectionEditor(
    corp_models.Partner,
    collection="partners",
    image_field="logo",
    constraints=PARTNER_LOGO,
    document=corp_schemas.PartnerDocument,
    label="Partner",
)
