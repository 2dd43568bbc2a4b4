# tests/conftest.py

import os
from typing import AsyncGenerator, Callable, Awaitable, List, Optional
from contextlib import asynccontextmanager

# ihiw 패키지를 임포트하기 전에 테스트용 설정을 환경 변수로 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# ihiw.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from ihiw.main import app as main_app
from ihiw.core import dependencies as deps
from ihiw.core.database import get_session
from ihiw.core.security import get_password_hash
from ihiw.services.notification import NotificationDispatcher

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모델 클래스가 한 번 이상 임포트되어야 합니다.
from ihiw.domains.models import *    # noqa: F401, F403

from ihiw.domains.usr import models as usr_models
from ihiw.domains.lab import models as lab_models


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 새 인메모리 SQLite 데이터베이스를 만들고, 하나의 연결(StaticPool)을 공유합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    각 테스트 함수마다 빈 데이터베이스와 비동기 세션을 제공합니다.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await test_engine.dispose()


# --- 알림 큐 대역 ---
class FakeRedis:
    """ARQ Redis 풀 대역. enqueue_job 호출을 기록만 합니다."""

    def __init__(self, fail: bool = False):
        self.jobs: List[tuple] = []
        self.fail = fail

    async def enqueue_job(self, function: str, *args, **kwargs):
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.jobs.append((function, *args))
        return None

    def templates(self) -> List[str]:
        """기록된 작업의 템플릿 이름 목록"""
        return [job[3] for job in self.jobs]


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def dispatcher(fake_redis: FakeRedis) -> NotificationDispatcher:
    return NotificationDispatcher(fake_redis)


# --- 실험실 픽스처 ---
@pytest_asyncio.fixture(scope="function")
def lab_factory(db_session: AsyncSession) -> Callable[..., Awaitable[lab_models.Lab]]:
    async def _create_lab(code: str, name: Optional[str] = None, **kwargs) -> lab_models.Lab:
        lab = lab_models.Lab(code=code, name=name or f"{code} laboratory", **kwargs)
        db_session.add(lab)
        await db_session.commit()
        await db_session.refresh(lab)
        return lab
    return _create_lab


@pytest_asyncio.fixture(scope="function")
async def test_lab_a(lab_factory: Callable) -> lab_models.Lab:
    return await lab_factory("LAB-A", "Lab A")


@pytest_asyncio.fixture(scope="function")
async def test_lab_b(lab_factory: Callable) -> lab_models.Lab:
    return await lab_factory("LAB-B", "Lab B")


# --- 역할별 사용자 픽스처 ---
@pytest_asyncio.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    역할과 소속 실험실을 지정하여 테스트 계정을 생성하는 팩토리 함수를 반환합니다.
    lab_id가 주어지면 실험실 프로필도 함께 만듭니다.
    """
    async def _create_user(
        login: str,
        password: str,
        authorities: List[usr_models.Authority],
        lab_id: Optional[int] = None,
        activated: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user = usr_models.User(
            login=login,
            password_hash=get_password_hash(password),
            email=f"{login}@example.com",
            authorities=[a.value for a in authorities],
            activated=activated,
            lang_key="en",
            **kwargs,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        if lab_id is not None:
            db_session.add(usr_models.LabProfile(user_id=user.id, lab_id=lab_id))
            await db_session.commit()
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_admin_user(user_factory: Callable) -> usr_models.User:
    """관리자(ROLE_ADMIN) 계정을 생성합니다."""
    return await user_factory(
        "sysadm", "sysadmpass123",
        authorities=[usr_models.Authority.ADMIN, usr_models.Authority.USER],
    )


@pytest_asyncio.fixture(scope="function")
async def test_pi_user(user_factory: Callable, test_lab_a: lab_models.Lab) -> usr_models.User:
    """Lab A 소속 PI 계정을 생성합니다."""
    return await user_factory(
        "pia", "pipass1234",
        authorities=[usr_models.Authority.PI, usr_models.Authority.USER],
        lab_id=test_lab_a.id,
    )


@pytest_asyncio.fixture(scope="function")
async def test_user(user_factory: Callable, test_lab_a: lab_models.Lab) -> usr_models.User:
    """Lab A 소속 일반 사용자(ROLE_USER)를 생성합니다."""
    return await user_factory(
        "testuser", "testpass123",
        authorities=[usr_models.Authority.USER],
        lab_id=test_lab_a.id,
        first_name="Test",
        last_name="User",
    )


@pytest_asyncio.fixture(scope="function")
async def test_user_in_other_lab(user_factory: Callable, test_lab_b: lab_models.Lab) -> usr_models.User:
    """Lab B 소속 일반 사용자를 생성합니다."""
    return await user_factory(
        "otheruser", "otherpass123",
        authorities=[usr_models.Authority.USER],
        lab_id=test_lab_b.id,
    )


# --- 역할별 인증 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
def authorized_client_factory(
    db_session: AsyncSession,
    dispatcher: NotificationDispatcher,
) -> Callable[[usr_models.User, str], AsyncGenerator[AsyncClient, None]]:
    """
    특정 사용자로 로그인된 AsyncClient를 생성하는 팩토리 함수를 반환합니다.
    관리자 의존성은 오버라이드하지 않으므로 역할 검사는 실제 로직을 따릅니다.
    """
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User, password: str) -> AsyncGenerator[AsyncClient, None]:
        def override_get_session():
            yield db_session

        def override_get_current_user():
            return user

        original_overrides = main_app.dependency_overrides.copy()
        try:
            main_app.dependency_overrides.update({
                get_session: override_get_session,
                deps.get_notification_dispatcher: lambda: dispatcher,
            })

            transport = ASGITransport(app=main_app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                login_data = {"username": user.login, "password": password}
                res = await client.post("/api/v1/usr/auth/token", data=login_data)
                if res.status_code != 200:
                    pytest.fail(f"Login failed for {user.login}: {res.text}")

                token = res.json()["access_token"]
                client.headers["Authorization"] = f"Bearer {token}"
                main_app.dependency_overrides[deps.get_current_active_user] = override_get_current_user
                yield client
        finally:
            main_app.dependency_overrides.clear()
            main_app.dependency_overrides.update(original_overrides)

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def admin_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_admin_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """관리자로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_admin_user, "sysadmpass123") as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def pi_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_pi_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """Lab A의 PI로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_pi_user, "pipass1234") as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def authorized_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """일반 사용자로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_user, "testpass123") as client:
        yield client


# --- 비동기 테스트 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession,
    dispatcher: NotificationDispatcher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    인증되지 않은 사용자를 위한 AsyncClient 인스턴스를 생성하고,
    테스트용 비동기 DB 세션과 알림 디스패처를 주입합니다.
    """
    def override_get_session():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides[get_session] = override_get_session
        main_app.dependency_overrides[deps.get_notification_dispatcher] = lambda: dispatcher

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)
