# ihiw/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다.
- 요청 단위 세션 의존성과 ARQ 태스크용 세션 컨텍스트를 제공합니다.
- 개발 환경에서 테이블을 생성하는 함수를 포함합니다. (스키마 마이그레이션은 범위 밖)
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import configure_mappers, sessionmaker

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw.core.config import settings

# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되도록 모델 패키지를 임포트합니다.
from ihiw.domains import models  # noqa: F401

logger = logging.getLogger(__name__)

_database_url = settings.DATABASE_URL.get_secret_value()
_engine_kwargs = {"echo": settings.DEBUG_MODE, "future": True}
if not _database_url.startswith("sqlite"):
    # SQLite의 StaticPool/NullPool은 풀 크기 인자를 받지 않습니다.
    _engine_kwargs.update(
        pool_recycle=3600,  # 1시간마다 연결 재활용
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
    )

engine: AsyncEngine = create_async_engine(_database_url, **_engine_kwargs)

# 비동기 세션을 생성하는 '세션 공장'
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

metadata = SQLModel.metadata


async def create_db_and_tables() -> None:
    """
    데이터베이스 테이블을 생성합니다. 개발 환경 전용이며 기존 테이블은 삭제하지 않습니다.
    """
    configure_mappers()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables created (or already present).")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    ARQ 태스크, CLI 등 요청 밖에서 사용할 독립적인 비동기 DB 세션 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
