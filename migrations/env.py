# migrations/env.py

import os
import sys
import asyncio
from logging.config import fileConfig

from alembic import context

from sqlalchemy import pool, text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

# alembic 명령을 어느 디렉터리에서 실행하든 realty 패키지를 임포트할 수 있도록 합니다.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from realty.core.config import settings        # noqa: E402
from realty.core.database import SCHEMA        # noqa: E402
import realty.domains.models                   # noqa: F401, E402  (테이블을 metadata에 등록)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata
database_url = config.get_main_option("sqlalchemy.url") or settings.DATABASE_URL.get_secret_value()

# alembic_version 은 public 스키마에 둡니다.
VERSION_TABLE_SCHEMA = 'public'


def include_object(object, name, type_, reflected, compare_to):
    """autogenerate 비교 대상을 realty 도메인 스키마의 객체로 한정합니다."""
    if type_ == "table":
        return object.schema in SCHEMA
    return True


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_schemas=True,
        include_object=include_object,
        version_table_schema=VERSION_TABLE_SCHEMA,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """DB 연결 없이 SQL 스크립트를 출력합니다 (alembic upgrade --sql)."""
    _configure(url=database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(database_url, poolclass=pool.NullPool)

    # 도메인 스키마는 테이블 생성 전에 존재해야 합니다.
    async with engine.begin() as connection:
        for schema_name in SCHEMA:
            await connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema_name}"))

    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
