# realty/core/database.py

"""
비동기 DB 엔진과 세션 팩토리를 제공하는 모듈입니다.

스키마/테이블 생성은 Alembic 마이그레이션(migrations/)이 담당하며,
여기서는 `SCHEMA` 목록만 공개하여 마이그레이션 환경이 스키마를 먼저 만들 수 있게 합니다.
"""

from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.config import settings


# 도메인별 PostgreSQL 스키마
# (usr: 계정, corp: 회사 프로필, shared: 공용 대기열, agt: 에이전트, prop: 매물, blog: 블로그, quote: 견적 요청)
SCHEMA = ['shared', 'usr', 'corp', 'agt', 'prop', 'blog', 'quote']


def _engine_options(url: str) -> Dict[str, Any]:
    """드라이버별 엔진 옵션. SQLite는 커넥션 풀 크기 옵션을 받지 않습니다."""
    options: Dict[str, Any] = {"echo": settings.DEBUG_MODE, "pool_pre_ping": True}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(pool_recycle=3600, pool_size=10, max_overflow=20)
    return options


_database_url = settings.DATABASE_URL.get_secret_value()
engine: AsyncEngine = create_async_engine(_database_url, **_engine_options(_database_url))

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    요청 단위 세션 (FastAPI Depends 용).
    커밋은 각 저장소 메서드가 직접 수행하고, 세션은 요청이 끝나면 닫힙니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ 태스크처럼 요청 밖에서 사용하는 세션.
    블록이 정상 종료되면 커밋하고, 예외가 발생하면 롤백한 뒤 다시 발생시킵니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
