# realty/domains/shared/tasks.py

import logging

from realty.core.config import settings
from realty.core.database import get_async_session_context
from realty.core.exceptions import DeleteError

from . import crud as shared_crud
from .services import get_asset_store

logger = logging.getLogger(__name__)


async def retry_pending_asset_deletions_task(ctx, store=None):
    """
    ARQ 워커에 의해 실행될, 삭제에 실패했던 원격 이미지를 다시 삭제하는 태스크.
    성공한 항목은 대기열에서 제거하고, 실패한 항목은 시도 횟수와 오류를 기록합니다.
    시도 한도(ASSET_DELETE_MAX_ATTEMPTS)에 도달한 항목은 수동 확인 대상으로 남깁니다.
    """
    store = store or get_asset_store()
    max_attempts = settings.ASSET_DELETE_MAX_ATTEMPTS
    deleted_count = 0
    failed_count = 0

    logger.info("--- ARQ 태스크: 삭제 대기 이미지 재시도 시작 ---")
    async with get_async_session_context() as session:
        pending_items = await shared_crud.pending_deletion.get_retryable(session, max_attempts=max_attempts)
        if not pending_items:
            logger.info("재시도할 삭제 대기 이미지가 없습니다.")
            return {"status": "success", "deleted_count": 0, "failed_count": 0}

        for pending in pending_items:
            try:
                await store.delete(pending.public_id)
            except Exception as e:
                if not isinstance(e, DeleteError):
                    logger.exception("이미지 삭제 재시도 중 예기치 않은 오류: %s", pending.public_id)
                pending.attempts += 1
                pending.last_error = e.message if isinstance(e, DeleteError) else f"unexpected error: {type(e).__name__}"
                session.add(pending)
                failed_count += 1
                if pending.attempts >= max_attempts:
                    logger.error(
                        "이미지 삭제 재시도 한도 도달 (수동 확인 필요): %s - %s", pending.public_id, pending.last_error
                    )
                else:
                    logger.warning("이미지 삭제 재시도 실패 (%s회): %s", pending.attempts, pending.public_id)
                continue

            await session.delete(pending)
            deleted_count += 1
            logger.info("삭제 대기 이미지 정리 완료: %s", pending.public_id)

    logger.info("--- 삭제 대기 이미지 재시도 종료: 성공 %s, 실패 %s ---", deleted_count, failed_count)
    return {"status": "success", "deleted_count": deleted_count, "failed_count": failed_count}
