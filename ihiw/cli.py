# ihiw/cli.py

"""
관리 명령줄 도구입니다. (`ihiw-admin`)

첫 관리자 계정처럼 API로 만들 수 없는 계정을 데이터베이스에 직접 생성합니다.
"""

import asyncio
import logging
from typing import Optional

import typer
from pydantic import ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw.core.database import AsyncSessionLocal, create_db_and_tables
from ihiw.core.logging_config import configure_logging
from ihiw.core.security import get_password_hash
from ihiw.domains.usr import crud as usr_crud
from ihiw.domains.usr import models as usr_models
from ihiw.domains.usr import schemas as usr_schemas

logger = logging.getLogger(__name__)

cli = typer.Typer(help="IHIW management commands")


async def create_admin_user(
    db: AsyncSession,
    *,
    login: str,
    email: str,
    password: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> Optional[usr_models.User]:
    """
    활성화된 관리자 계정을 생성합니다.
    API와 같은 규칙으로 입력을 검증하며, 형식이 잘못되었거나 로그인 이름/이메일이 이미 있으면 None을 반환합니다.
    """
    try:
        obj_in = usr_schemas.UserCreate(
            login=login, email=email, first_name=first_name, last_name=last_name,
        )
    except ValidationError as e:
        logger.error("잘못된 관리자 계정 정보입니다: %s", e)
        return None
    login, email = obj_in.login, str(obj_in.email)

    if await usr_crud.user.get_by_email(db, email=email):
        logger.error("이미 존재하는 이메일입니다: %s", email)
        return None
    if await usr_crud.user.get_by_login(db, login=login):
        logger.error("이미 존재하는 로그인 이름입니다: %s", login)
        return None

    db_user = usr_models.User(
        login=login.lower(),
        email=email.lower(),
        first_name=first_name,
        last_name=last_name,
        password_hash=get_password_hash(password),
        activated=True,
        authorities=[usr_models.Authority.ADMIN.value, usr_models.Authority.USER.value],
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    logger.info("관리자 계정이 생성되었습니다: %s (%s)", db_user.login, db_user.email)
    return db_user


@cli.command("create-admin")
def create_admin(
    login: str = typer.Option(
        ..., '--login', '-l',
        prompt="관리자 로그인 이름을 입력하세요",
        help="로그인 시 사용할 이름입니다."
    ),
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="관리자 이메일을 입력하세요",
        help="생성할 관리자 계정의 이메일 주소입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 관리자 계정의 비밀번호입니다. (최소 8자 이상)"
    ),
    first_name: Optional[str] = typer.Option(None, '--first-name', help="이름"),
    last_name: Optional[str] = typer.Option(None, '--last-name', help="성"),
    create_tables: bool = typer.Option(False, '--create-tables', help="테이블이 없으면 먼저 생성합니다."),
):
    """
    IHIW 애플리케이션의 관리자(ROLE_ADMIN) 계정을 생성합니다.
    """
    configure_logging()
    if len(password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.", err=True)
        raise typer.Exit(code=1)

    async def run_creation():
        if create_tables:
            await create_db_and_tables()
        async with AsyncSessionLocal() as db:
            return await create_admin_user(
                db, login=login, email=email, password=password,
                first_name=first_name, last_name=last_name,
            )

    if asyncio.run(run_creation()) is None:
        raise typer.Exit(code=1)
    typer.echo(f"관리자 계정이 생성되었습니다: {login}")


@cli.command("create-tables")
def create_tables():
    """개발 환경용: 모든 테이블을 생성합니다."""
    configure_logging()
    asyncio.run(create_db_and_tables())
    typer.echo("테이블 생성 완료")


if __name__ == "__main__":
    cli()
