# realty/domains/agt/services.py

"""
'agt' 도메인의 비즈니스 로직 모듈입니다.

프로필 이미지 처리 순서는 회사 프로필과 같습니다:
'검증 → 새 이미지 업로드(실패 시 중단) → 이전 이미지 삭제(실패 시 경고) → 저장 (실패 시 새 이미지 정리)'.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.exceptions import NotFoundError, ValidationError
from realty.domains.shared.services import (
    AGENT_IMAGE,
    AssetStore,
    ImageUpload,
    collect_warnings,
    discard_asset,
    upload_image,
)
from . import crud as agt_crud
from . import models as agt_models
from . import schemas as agt_schemas

logger = logging.getLogger(__name__)

ACTIVE_PROPERTIES_MESSAGE = (
    "Cannot delete agent with active properties. Please reassign or delete the properties first."
)


async def get_agent_or_404(db: AsyncSession, agent_id: int) -> agt_models.Agent:
    agent = await agt_crud.agent.reload(db, agent_id)
    if agent is None:
        raise NotFoundError("Agent not found")
    return agent


async def _commit_or_cleanup(
    db: AsyncSession, store: AssetStore, agent: agt_models.Agent, new_image_url: Optional[str]
) -> agt_models.Agent:
    """저장에 실패하면 롤백하고 방금 올린 이미지를 정리합니다. 이메일 유일성 위반은 400입니다."""
    try:
        db.add(agent)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        await discard_asset(None, store, new_image_url)
        raise ValidationError(
            errors=[{"field": "email", "message": "Agent with this email already exists"}]
        ) from e
    except Exception:
        await db.rollback()
        await discard_asset(None, store, new_image_url)
        raise
    return await agt_crud.agent.reload(db, agent.id)


async def create_agent(
    db: AsyncSession,
    store: AssetStore,
    create: agt_schemas.AgentCreate,
    image: Optional[ImageUpload],
    acting_user_id: Optional[int],
) -> agt_models.Agent:
    if image is None:
        raise ValidationError(errors=[{"field": "image", "message": "Agent image is required"}])
    await agt_crud.agent.ensure_email_free(db, create.email)

    asset = await upload_image(store, image, AGENT_IMAGE)
    agent = agt_models.Agent(**create.model_dump(mode="json"), image=asset.url, created_by_id=acting_user_id)
    agent = await _commit_or_cleanup(db, store, agent, asset.url)
    logger.info("에이전트 등록: id=%s, email=%s", agent.id, agent.email)
    return agent


async def update_agent(
    db: AsyncSession,
    store: AssetStore,
    agent: agt_models.Agent,
    update: agt_schemas.AgentUpdate,
    image: Optional[ImageUpload],
) -> Tuple[agt_models.Agent, List[str]]:
    """전달된 필드만 반영합니다. 새 이미지가 있으면 업로드 후 이전 이미지를 정리합니다."""
    changes: Dict[str, Any] = update.model_dump(exclude_unset=True, mode="json")
    if "email" in changes:
        await agt_crud.agent.ensure_email_free(db, changes["email"], owner_id=agent.id)

    warnings: List[str] = []
    new_url = None
    if image is not None:
        asset = await upload_image(store, image, AGENT_IMAGE)
        new_url = asset.url
        cleanup = await discard_asset(db, store, agent.image)
        warnings.extend(collect_warnings(cleanup))
        changes["image"] = new_url

    agent.sqlmodel_update(changes)
    agent = await _commit_or_cleanup(db, store, agent, new_url)
    logger.info("에이전트 수정: id=%s, fields=%s", agent.id, sorted(changes))
    return agent, warnings


async def delete_agent(db: AsyncSession, store: AssetStore, agent: agt_models.Agent) -> List[str]:
    """
    활성 매물을 담당 중인 에이전트는 삭제할 수 없습니다 (400).
    나머지 매물의 담당자는 비워지고, 프로필 이미지는 best-effort로 삭제됩니다.
    """
    if await agt_crud.agent.count_active_properties(db, agent.id) > 0:
        raise ValidationError(ACTIVE_PROPERTIES_MESSAGE)

    agent_id = agent.id
    cleanup = await discard_asset(db, store, agent.image)
    await agt_crud.agent.release_properties(db, agent_id)
    await db.delete(agent)
    await db.commit()
    logger.info("에이전트 삭제: id=%s", agent_id)
    return collect_warnings(cleanup)
