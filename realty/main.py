# realty/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from arq.connections import create_pool, RedisSettings
from arq.cron import cron
from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from realty import API_PREFIX
from realty.core.config import settings
from realty.core.database import engine
from realty.core.dependencies import get_db_session
from realty.core.exceptions import AppError, errors_from_pydantic

# 태스크 모듈 임포트
from realty.core import tasks as core_tasks
from realty.domains.shared import tasks as shared_tasks

# 도메인 라우터 임포트
from realty.domains.shared.routers import router as shared_router
from realty.domains.usr.routers import router as usr_router
from realty.domains.corp.routers import router as corp_router
from realty.domains.agt.routers import router as agt_router
from realty.domains.prop.routers import router as prop_router
from realty.domains.blog.routers import router as blog_router
from realty.domains.quote.routers import router as quote_router

# -- 로깅 설정 --
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    shared_tasks.retry_pending_asset_deletions_task,
]


# ARQ 워커 설정 클래스 (arq realty.main.ArqWorkerSettings 로 실행)
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    cron_jobs = [
        # 매일 자정(00:00) 데이터베이스 헬스 체크
        cron(
            core_tasks.health_check_database_task,
            name='daily_db_health_check',
            hour=0, minute=0,
            timeout=300,
            keep_result=600,
        ),
        # 매일 새벽 1시(01:00) 삭제 대기 이미지 재시도
        cron(
            shared_tasks.retry_pending_asset_deletions_task,
            name='daily_pending_asset_deletion_retry',
            hour=1, minute=0,
            timeout=1800,
            keep_result=3600,
        ),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    """
    logger.info("%s 시작 중... (env=%s)", settings.APP_NAME, settings.APP_ENV)
    try:
        logger.info("ARQ Redis 커넥션 풀을 생성합니다...")
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")
    except Exception:
        logger.exception("애플리케이션 시작 중 오류 발생")
        raise

    yield

    logger.info("%s 종료 중...", settings.APP_NAME)
    try:
        if app.state.redis:
            await app.state.redis.close()
            logger.info("ARQ Redis 연결 풀 종료 완료.")
        await engine.dispose()
        logger.info("데이터베이스 연결 풀 종료 완료.")
    except Exception:
        logger.exception("애플리케이션 종료 중 오류 발생")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -- 예외 핸들러: 모든 오류를 {success: false, message, errors?} 엔벨로프로 변환 --
def _error_body(message: str, errors=None, **extra) -> dict:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return body


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.errors),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation failed", errors_from_pydantic(exc)),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("처리되지 않은 오류: %s %s", request.method, request.url.path)
    extra = {"error": str(exc)} if settings.APP_ENV == "development" else {}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", **extra),
    )


# -- 도메인 라우터 포함 --
app.include_router(shared_router, prefix=f"{API_PREFIX}/shared", tags=["Shared (시스템 공용정보 관리)"])
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr", tags=["User Management (사용자 관리)"])
app.include_router(corp_router, prefix=f"{API_PREFIX}/company", tags=["Company Profile Management (회사 프로필 관리)"])
app.include_router(agt_router, prefix=f"{API_PREFIX}/agents")
app.include_router(prop_router, prefix=f"{API_PREFIX}/properties")
app.include_router(blog_router, prefix=f"{API_PREFIX}/blogs")
app.include_router(quote_router, prefix=f"{API_PREFIX}/quotes")


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    API의 시작점을 알리고 문서 링크를 제공합니다.
    """
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.execute(select(1))
        connected = result.scalar_one_or_none() == 1
    except Exception:
        # 드라이버 오류 내용은 로그에만 남기고 응답에는 싣지 않습니다.
        logger.exception("헬스 체크 중 데이터베이스 연결 오류")
        raise AppError("Database health check failed")
    if not connected:
        raise AppError("Database health check failed: No result from test query")
    return {"status": "ok", "database_connection": "successful"}
