# tests/domains/test_account_n.py

"""
계정 수명 주기 (활성화, 비밀번호 재설정) 엔드포인트와 계정 CRUD의 통합 테스트 모듈입니다.
"""

from datetime import datetime, timedelta, UTC

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw.core.errors import EmailConflictError, LoginConflictError
from ihiw.core.security import verify_password
from ihiw.domains.usr import crud as usr_crud
from ihiw.domains.usr import models as usr_models
from ihiw.domains.usr import schemas as usr_schemas
from ihiw.services.notification import ACTIVATION_CONFIRMATION_TEMPLATE, PASSWORD_RESET_TEMPLATE


# =============================================================================
# 1. 활성화
# =============================================================================
@pytest.mark.asyncio
async def test_activate_account_with_key(
    client: AsyncClient,
    db_session: AsyncSession,
    user_factory,
    fake_redis,
):
    sleeper = await user_factory(
        "sleeper", "sleeperpass1", authorities=[usr_models.Authority.USER],
        activated=False, activation_key="ACTIVATE0123456789AB",
    )
    response = await client.get("/api/v1/usr/account/activate", params={"key": "ACTIVATE0123456789AB"})
    assert response.status_code == 200
    assert response.json() == {"login": "sleeper", "activated": True}

    await db_session.refresh(sleeper)
    assert sleeper.activated is True
    assert sleeper.activation_key is None
    assert fake_redis.templates() == [ACTIVATION_CONFIRMATION_TEMPLATE]


@pytest.mark.asyncio
async def test_activate_account_unknown_key(client: AsyncClient, fake_redis):
    response = await client.get("/api/v1/usr/account/activate", params={"key": "nope"})
    assert response.status_code == 404
    assert fake_redis.jobs == []


# =============================================================================
# 2. 비밀번호 재설정
# =============================================================================
@pytest.mark.asyncio
async def test_reset_password_init_sends_mail(
    client: AsyncClient,
    db_session: AsyncSession,
    test_user: usr_models.User,
    fake_redis,
):
    response = await client.post(
        "/api/v1/usr/account/reset-password/init", json={"email": "TESTUSER@example.com"}
    )
    assert response.status_code == 200

    await db_session.refresh(test_user)
    assert test_user.reset_key
    assert fake_redis.templates() == [PASSWORD_RESET_TEMPLATE]
    assert fake_redis.jobs[0][1]["reset_key"] == test_user.reset_key


@pytest.mark.asyncio
async def test_reset_password_init_unknown_email(client: AsyncClient, fake_redis):
    response = await client.post(
        "/api/v1/usr/account/reset-password/init", json={"email": "nobody@example.com"}
    )
    assert response.status_code == 200
    assert fake_redis.jobs == []


@pytest.mark.asyncio
async def test_reset_password_finish(
    client: AsyncClient,
    db_session: AsyncSession,
    user_factory,
):
    forgetful = await user_factory(
        "forgetful", "oldpassword1", authorities=[usr_models.Authority.USER],
        reset_key="RESET0123456789ABCDE", reset_date=datetime.now(UTC),
    )
    response = await client.post(
        "/api/v1/usr/account/reset-password/finish",
        json={"key": "RESET0123456789ABCDE", "new_password": "brandnewpass"},
    )
    assert response.status_code == 200

    await db_session.refresh(forgetful)
    assert forgetful.reset_key is None
    assert verify_password("brandnewpass", forgetful.password_hash)

    login = await client.post(
        "/api/v1/usr/auth/token", data={"username": "forgetful", "password": "brandnewpass"}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_reset_password_finish_expired_key(
    client: AsyncClient,
    user_factory,
):
    await user_factory(
        "latecomer", "oldpassword1", authorities=[usr_models.Authority.USER],
        reset_key="EXPIRED0123456789ABC", reset_date=datetime.now(UTC) - timedelta(days=2),
    )
    response = await client.post(
        "/api/v1/usr/account/reset-password/finish",
        json={"key": "EXPIRED0123456789ABC", "new_password": "brandnewpass"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reset_password_finish_short_password(client: AsyncClient):
    response = await client.post(
        "/api/v1/usr/account/reset-password/finish",
        json={"key": "whatever", "new_password": "short"},
    )
    assert response.status_code == 422


# =============================================================================
# 3. CRUD 수준 동작
# =============================================================================
@pytest.mark.asyncio
async def test_create_maps_integrity_error_to_login_conflict(
    db_session: AsyncSession,
    test_user: usr_models.User,
):
    """
    중복 검사를 거치지 않은 동시 생성이 저장소 제약에 걸리면 충돌 오류로 바뀝니다.
    """
    obj_in = usr_schemas.UserCreate(login="TestUser", email="racer@example.com")
    with pytest.raises(LoginConflictError):
        await usr_crud.user.create(db_session, obj_in=obj_in, authorities=["ROLE_USER"])


@pytest.mark.asyncio
async def test_create_maps_integrity_error_to_email_conflict(
    db_session: AsyncSession,
    test_user: usr_models.User,
):
    obj_in = usr_schemas.UserCreate(login="racer", email="testuser@example.com")
    with pytest.raises(EmailConflictError):
        await usr_crud.user.create(db_session, obj_in=obj_in, authorities=["ROLE_USER"])


@pytest.mark.asyncio
async def test_update_maps_integrity_error_to_email_conflict(
    db_session: AsyncSession,
    test_user: usr_models.User,
    test_user_in_other_lab: usr_models.User,
):
    """
    서비스의 중복 검사 없이 저장소 제약에 걸린 수정은 롤백되고 충돌 오류로 바뀝니다.
    """
    obj_in = usr_schemas.UserUpdate(id=test_user.id, login="testuser", email="otheruser@example.com")
    with pytest.raises(EmailConflictError):
        await usr_crud.user.update_account(
            db_session, db_obj=test_user, obj_in=obj_in, authorities=["ROLE_USER"]
        )

    await db_session.refresh(test_user)
    assert test_user.email == "testuser@example.com"


@pytest.mark.asyncio
async def test_update_maps_integrity_error_to_login_conflict(
    db_session: AsyncSession,
    test_user: usr_models.User,
    test_user_in_other_lab: usr_models.User,
):
    obj_in = usr_schemas.UserUpdate(id=test_user.id, login="OtherUser", email="testuser@example.com")
    with pytest.raises(LoginConflictError):
        await usr_crud.user.update_account(
            db_session, db_obj=test_user, obj_in=obj_in, authorities=["ROLE_USER"]
        )

    await db_session.refresh(test_user)
    assert test_user.login == "testuser"


def test_reset_key_expiry_accepts_naive_dates():
    db_user = usr_models.User(login="x", email="x@example.com", password_hash="x")
    assert usr_crud.user.reset_key_expired(db_user)

    db_user.reset_date = datetime.now(UTC).replace(tzinfo=None) - timedelta(hours=1)
    assert not usr_crud.user.reset_key_expired(db_user)

    db_user.reset_date = datetime.now(UTC) - timedelta(hours=25)
    assert usr_crud.user.reset_key_expired(db_user)


@pytest.mark.asyncio
async def test_get_lab_id_for_user_without_profile(
    db_session: AsyncSession,
    test_admin_user: usr_models.User,
):
    assert await usr_crud.lab_profile.get_lab_id_for_user(db_session, user_id=test_admin_user.id) is None
    assert await usr_crud.lab_profile.get_lab_id_for_user(db_session, user_id=None) is None
