# scripts/create_admin.py

"""
초기 운영 데이터 생성을 위한 CLI입니다.

    python -m scripts.create_admin create-admin -e admin@example.com -u admin
    python -m scripts.create_admin init-company
"""

import asyncio
import logging

import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.database import AsyncSessionLocal
from realty.core.exceptions import ValidationError
from realty.domains.usr import crud as usr_crud
from realty.domains.usr import schemas as usr_schemas
from realty.domains.usr.models import UserRole
from realty.domains.corp import crud as corp_crud

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger("realty.scripts")

cli = typer.Typer(help="Realty CMS 관리용 명령 모음")


async def create_admin_user(db: AsyncSession, user_in: usr_schemas.UserCreate) -> bool:
    """
    관리자 계정을 생성합니다. 사용자명/이메일이 중복되면 False를 반환합니다.
    """
    try:
        created = await usr_crud.user.create(db, obj_in=user_in)
    except ValidationError as e:
        for error in e.errors or []:
            logger.error("관리자 생성 실패: %s (%s)", error["message"], error["field"])
        return False
    logger.info("관리자 계정 생성 완료: id=%s, username=%s", created.id, created.username)
    return True


async def init_company(db: AsyncSession) -> None:
    """활성 회사 정보가 없으면 기본값으로 생성합니다."""
    company = await corp_crud.company.ensure_active(db, acting_user_id=None)
    logger.info("활성 회사 정보: id=%s, name=%s", company.id, company.name)


@cli.command("create-admin")
def create_admin(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="관리자 이메일을 입력하세요",
        help="생성할 관리자 계정의 이메일 주소입니다."
    ),
    username: str = typer.Option(
        ..., '--username', '-u',
        prompt="관리자 사용자명(ID)을 입력하세요",
        help="로그인 시 사용할 사용자명(ID)입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="관리자 비밀번호입니다. (최소 8자 이상)"
    ),
    full_name: str = typer.Option("Admin", '--name', '-n', help="관리자의 이름입니다."),
):
    """
    회사 정보를 수정할 수 있는 관리자(ADMIN) 계정을 생성합니다.
    """
    if len(password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.", err=True)
        raise typer.Abort()

    user_data = usr_schemas.UserCreate(
        email=email,
        username=username,
        password=password,
        full_name=full_name,
        role=UserRole.ADMIN,
    )

    async def run() -> bool:
        async with AsyncSessionLocal() as db:
            return await create_admin_user(db, user_data)

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@cli.command("init-company")
def init_company_command():
    """
    기본값(회사명 'ImanPrime')으로 활성 회사 정보를 생성합니다. 이미 있으면 아무것도 하지 않습니다.
    """
    async def run() -> None:
        async with AsyncSessionLocal() as db:
            await init_company(db)

    asyncio.run(run())


if __name__ == "__main__":
    cli()
