# realty/domains/prop/services.py

"""
'prop' 도메인의 비즈니스 로직 모듈입니다.

매물 한 건은 대표 이미지, 갤러리 이미지(최대 10장), 평면도(최대 5장)를 가집니다.
이미지 처리 순서는 다른 도메인과 같습니다:
'검증 → 새 이미지 업로드(실패 시 이미 올린 이미지 정리 후 중단) → 이전 이미지 삭제(실패 시 경고) → 저장'.
갤러리와 평면도는 새 파일이 전달되면 목록 전체가 교체됩니다.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.exceptions import NotFoundError, UploadError, ValidationError
from realty.domains.agt import crud as agt_crud
from realty.domains.shared.schemas import AssetRef
from realty.domains.shared.services import (
    PROPERTY_IMAGE,
    AssetStore,
    ImageUpload,
    collect_warnings,
    discard_asset,
    discard_assets,
    upload_all,
    upload_image,
)
from . import crud as prop_crud
from . import models as prop_models
from . import schemas as prop_schemas

logger = logging.getLogger(__name__)


async def get_property_or_404(db: AsyncSession, property_id: int) -> prop_models.Property:
    prop = await prop_crud.listing.reload(db, property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


async def ensure_agent(db: AsyncSession, agent_id: int) -> None:
    if await agt_crud.agent.get(db, agent_id) is None:
        raise ValidationError(errors=[{"field": "agent_id", "message": "Agent not found"}])


def floor_plan_entries(refs: Sequence[AssetRef], names: Sequence[str]) -> List[Dict[str, str]]:
    """이름이 없는 평면도는 'Floor Plan N'(1부터)으로 표시합니다."""
    entries = []
    for index, ref in enumerate(refs):
        name = names[index].strip() if index < len(names) and names[index] else ""
        entries.append({"name": name or f"Floor Plan {index + 1}", "image": ref.url})
    return entries


class _Media:
    """요청 하나에서 새로 올린 이미지. 저장에 실패하면 한꺼번에 정리합니다."""

    def __init__(self):
        self.image: Optional[AssetRef] = None
        self.gallery: List[AssetRef] = []
        self.floor_plans: List[AssetRef] = []

    @property
    def urls(self) -> List[str]:
        refs = ([self.image] if self.image else []) + self.gallery + self.floor_plans
        return [ref.url for ref in refs]

    async def upload(
        self,
        store: AssetStore,
        image: Optional[ImageUpload],
        gallery: Sequence[ImageUpload],
        floor_plans: Sequence[ImageUpload],
    ) -> "_Media":
        try:
            if image is not None:
                self.image = await upload_image(store, image, PROPERTY_IMAGE)
            self.gallery = await upload_all(store, list(gallery), PROPERTY_IMAGE)
            self.floor_plans = await upload_all(store, list(floor_plans), PROPERTY_IMAGE)
        except UploadError:
            await self.discard(store)
            raise
        return self

    async def discard(self, store: AssetStore) -> None:
        await discard_assets(None, store, self.urls)


async def _commit_or_cleanup(
    db: AsyncSession, store: AssetStore, prop: prop_models.Property, media: _Media
) -> prop_models.Property:
    try:
        db.add(prop)
        await db.commit()
    except Exception:
        await db.rollback()
        await media.discard(store)
        raise
    return await prop_crud.listing.reload(db, prop.id)


async def create_property(
    db: AsyncSession,
    store: AssetStore,
    create: prop_schemas.PropertyCreate,
    *,
    image: Optional[ImageUpload],
    gallery: Sequence[ImageUpload] = (),
    floor_plans: Sequence[ImageUpload] = (),
    floor_plan_names: Sequence[str] = (),
    acting_user_id: Optional[int] = None,
) -> prop_models.Property:
    if image is None:
        raise ValidationError(errors=[{"field": "image", "message": "Property image is required"}])
    await ensure_agent(db, create.agent_id)

    media = await _Media().upload(store, image, gallery, floor_plans)
    prop = prop_models.Property(
        **create.model_dump(mode="json"),
        image=media.image.url,
        images=[ref.url for ref in media.gallery],
        floor_plans=floor_plan_entries(media.floor_plans, floor_plan_names),
        created_by_id=acting_user_id,
    )
    prop = await _commit_or_cleanup(db, store, prop, media)
    logger.info("매물 등록: id=%s, agent=%s, status=%s", prop.id, prop.agent_id, prop.status)
    return prop


async def update_property(
    db: AsyncSession,
    store: AssetStore,
    prop: prop_models.Property,
    update: prop_schemas.PropertyUpdate,
    *,
    image: Optional[ImageUpload] = None,
    gallery: Sequence[ImageUpload] = (),
    floor_plans: Sequence[ImageUpload] = (),
    floor_plan_names: Sequence[str] = (),
) -> Tuple[prop_models.Property, List[str]]:
    """전달된 필드만 반영합니다. 교체된 이미지는 업로드 성공 후 best-effort로 정리됩니다."""
    changes: Dict[str, Any] = update.model_dump(exclude_unset=True, mode="json")
    if changes.get("agent_id") is not None:
        await ensure_agent(db, changes["agent_id"])

    media = await _Media().upload(store, image, gallery, floor_plans)
    replaced: List[Optional[str]] = []
    if media.image is not None:
        replaced.append(prop.image)
        changes["image"] = media.image.url
    if media.gallery:
        replaced.extend(prop.images or [])
        changes["images"] = [ref.url for ref in media.gallery]
    if media.floor_plans:
        replaced.extend(plan.get("image") for plan in prop.floor_plans or [])
        changes["floor_plans"] = floor_plan_entries(media.floor_plans, floor_plan_names)
    cleanup = await discard_assets(db, store, replaced)

    prop.sqlmodel_update(changes)
    prop = await _commit_or_cleanup(db, store, prop, media)
    logger.info("매물 수정: id=%s, fields=%s", prop.id, sorted(changes))
    return prop, collect_warnings(*cleanup)


async def delete_property(db: AsyncSession, store: AssetStore, prop: prop_models.Property) -> List[str]:
    """레코드를 삭제하고 대표/갤러리/평면도 이미지를 모두 정리합니다. 정리 실패는 경고로 보고됩니다."""
    property_id = prop.id
    urls = [prop.image, *(prop.images or []), *(plan.get("image") for plan in prop.floor_plans or [])]
    cleanup = await discard_assets(db, store, urls)
    await db.delete(prop)
    await db.commit()
    logger.info("매물 삭제: id=%s", property_id)
    return collect_warnings(*cleanup)


async def record_view(db: AsyncSession, prop: prop_models.Property) -> None:
    await prop_crud.listing.increment_views(db, prop.id)
    prop.views = (prop.views or 0) + 1
