# realty/domains/quote/services.py

"""
'quote' 도메인의 비즈니스 로직 모듈입니다.
"""

import logging
from enum import Enum
from typing import Any, Dict

from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.exceptions import NotFoundError, ValidationError
from realty.domains.agt import crud as agt_crud
from . import crud as quote_crud
from . import models as quote_models
from . import schemas as quote_schemas

logger = logging.getLogger(__name__)

# null을 보내도 비울 수 없는 필드 (null은 무시)
REQUIRED_FIELDS = ("status", "priority", "preferred_contact_method")


async def get_quote_or_404(db: AsyncSession, quote_id: int) -> quote_models.QuoteRequest:
    quote = await quote_crud.quote_request.reload(db, quote_id)
    if quote is None:
        raise NotFoundError("Quote request not found")
    return quote


async def submit_quote_request(
    db: AsyncSession, create: quote_schemas.QuoteRequestCreate
) -> quote_models.QuoteRequest:
    quote = quote_models.QuoteRequest(**create.model_dump(mode="json"))
    db.add(quote)
    await db.commit()
    await db.refresh(quote)
    logger.info("견적 요청 접수: id=%s, project_type=%s", quote.id, quote.project_type)
    return quote


async def update_quote_request(
    db: AsyncSession, quote: quote_models.QuoteRequest, update: quote_schemas.QuoteRequestUpdate
) -> quote_models.QuoteRequest:
    """전달된 필드만 반영합니다. 담당 에이전트가 없으면 400입니다."""
    changes: Dict[str, Any] = {
        key: value.value if isinstance(value, Enum) else value
        for key, value in update.model_dump(exclude_unset=True).items()
        if value is not None or key not in REQUIRED_FIELDS
    }
    if changes.get("assigned_to_id") is not None:
        if await agt_crud.agent.get(db, changes["assigned_to_id"]) is None:
            raise ValidationError("Assigned agent not found")

    quote.sqlmodel_update(changes)
    db.add(quote)
    await db.commit()
    logger.info("견적 요청 수정: id=%s, fields=%s", quote.id, sorted(changes))
    return await quote_crud.quote_request.reload(db, quote.id)


async def add_note(
    db: AsyncSession, quote: quote_models.QuoteRequest, content: str, acting_user_id: int
) -> quote_models.QuoteRequest:
    """앞뒤 공백을 제거한 메모를 추가합니다. 내용이 비어 있으면 400입니다."""
    text = (content or "").strip()
    if not text:
        raise ValidationError("Note content is required")
    quote.notes.append(quote_models.QuoteNote(content=text, added_by_id=acting_user_id))
    db.add(quote)
    await db.commit()
    logger.info("견적 요청 메모 추가: quote=%s, user=%s", quote.id, acting_user_id)
    return await quote_crud.quote_request.reload(db, quote.id)


async def delete_quote_request(db: AsyncSession, quote: quote_models.QuoteRequest) -> None:
    quote_id = quote.id
    await db.delete(quote)
    await db.commit()
    logger.info("견적 요청 삭제: id=%s", quote_id)
