# ihiw/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq.connections import create_pool, RedisSettings

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

# 핵심 설정 및 데이터베이스 모듈 임포트
from ihiw.core.config import settings
from ihiw.core.database import engine, get_session
from ihiw.core.logging_config import configure_logging
from ihiw import API_PREFIX

# 태스크 모듈 임포트
from ihiw.core import tasks as core_tasks
from ihiw.domains.usr import tasks as usr_tasks
from ihiw.services.mail_service import MailService

# 도메인 라우터 임포트
from ihiw.domains.usr.routers import router as usr_router
from ihiw.domains.lab.routers import router as lab_router

logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    usr_tasks.send_email_from_template_task,
]


async def worker_startup(ctx) -> None:
    """워커 시작 시 로깅을 구성하고 메일 서비스를 컨텍스트에 올려둡니다."""
    configure_logging()
    ctx["mail_service"] = MailService()
    logger.info("ARQ worker started")


# ARQ 워커 설정 클래스
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    on_startup = worker_startup
    jobs = [
        {
            'name': 'daily_db_health_check',
            'function': 'ihiw.core.tasks.health_check_database_task',
            'cron': '0 0 * * *',
            'timeout': 300,
            'keep_result': 600,
        },
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(로깅, ARQ Redis, 데이터베이스)를 함께 처리합니다.
    """
    configure_logging()
    logger.info("FastAPI 애플리케이션 시작 중...")
    try:
        # ARQ Redis 커넥션 풀 생성 및 app.state에 할당
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")
    except Exception as e:
        # 큐가 없어도 요청은 처리합니다. 알림은 경고 로그와 함께 건너뜁니다.
        logger.error("ARQ Redis 커넥션 풀 생성 실패: %s", e)
        app.state.redis = None

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    try:
        if app.state.redis:
            await app.state.redis.close()
            logger.info("ARQ Redis 연결 풀 종료 완료.")
        await engine.dispose()
        logger.info("데이터베이스 연결 풀 종료 완료.")
    except Exception as e:
        logger.error("애플리케이션 종료 중 오류 발생: %s", e)


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
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "Link", "X-Total-Count", "X-ihiwApp-alert", "X-ihiwApp-error", "X-ihiwApp-params"],
)

# -- 도메인 라우터 포함 --
app.include_router(usr_router, prefix=f"{API_PREFIX}/usr", tags=["User Management (계정 관리)"])
app.include_router(lab_router, prefix=f"{API_PREFIX}/lab", tags=["Lab & Project (실험실 및 프로젝트)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )
