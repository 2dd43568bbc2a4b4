# ihiw/domains/usr/routers.py

"""
'usr' 도메인 (인증, 계정 관리, 계정 수명 주기)의 API 엔드포인트를 정의하는 모듈입니다.
"""

import logging
from typing import List, Optional
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw import API_PREFIX
from ihiw.core.config import settings
from ihiw.core.database import get_session
from ihiw.core import dependencies as deps
from ihiw.core.errors import NotFoundError, alert_headers
from ihiw.core.pagination import PageRequest, generate_pagination_headers
from ihiw.services.notification import NotificationDispatcher

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas
from .services import UserAdministrationService

logger = logging.getLogger(__name__)

# 라우터 인스턴스 생성 (prefix는 main.py에서 관리)
router = APIRouter(
    tags=["User Management (계정 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_user_service(
    db: AsyncSession = Depends(get_session),
    dispatcher: NotificationDispatcher = Depends(deps.get_notification_dispatcher),
) -> UserAdministrationService:
    return UserAdministrationService(db, dispatcher)


# =============================================================================
# 1. 인증 (Authentication) 엔드포인트
# =============================================================================

@router.post("/auth/token", response_model=usr_schemas.Token, summary="Access Token 획득")
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_session),
):
    db_user = await usr_crud.user.authenticate(
        db, login=form_data.username, password=form_data.password
    )
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect login or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not db_user.activated:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User not activated")

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = deps.create_access_token(data={"sub": db_user.login}, expires_delta=access_token_expires)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/auth/me", response_model=usr_schemas.UserRead, summary="현재 사용자 정보 조회")
async def read_users_me(current_user: usr_models.User = Depends(deps.get_current_active_user)):
    return current_user


# =============================================================================
# 2. 계정 (User) 관리 엔드포인트
# =============================================================================

@router.post("/users", response_model=usr_schemas.UserRead, status_code=status.HTTP_201_CREATED, summary="새 계정 생성")
async def create_user(
    user_in: usr_schemas.UserCreate,
    response: Response,
    service: UserAdministrationService = Depends(get_user_service),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    비활성 계정을 만들고 생성 안내 메일을 발송합니다.
    """
    logger.debug("REST request to save User : %s", user_in.login)
    db_user = await service.create_account(user_in)
    response.headers["Location"] = f"{API_PREFIX}/usr/users/{db_user.login}"
    response.headers.update(alert_headers("userManagement.created", db_user.login))
    return db_user


@router.put("/users", response_model=usr_schemas.UserRead, summary="계정 수정")
async def update_user(
    user_in: usr_schemas.UserUpdate,
    response: Response,
    service: UserAdministrationService = Depends(get_user_service),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """
    - 관리자는 모든 계정을 수정할 수 있습니다.
    - PI는 같은 실험실 계정만 수정할 수 있으며, 역할 목록은 변경되지 않습니다.
    """
    logger.debug("REST request to update User : %s", user_in.login)
    db_user = await service.update_account(current_user, user_in)
    response.headers.update(alert_headers("userManagement.updated", db_user.login))
    return db_user


@router.get("/users", response_model=List[usr_schemas.UserRead], summary="계정 목록 조회")
async def read_users(
    request: Request,
    response: Response,
    page: Optional[int] = Query(None, ge=0),
    size: Optional[int] = Query(None, ge=1, le=2000),
    sort: Optional[str] = Query(None, description="필드,방향 (예: login,desc)"),
    service: UserAdministrationService = Depends(get_user_service),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """
    - 관리자는 모든 계정을 조회합니다.
    - PI는 자신의 실험실 계정만 조회합니다.
    - 그 외 사용자는 빈 목록을 받습니다.
    """
    page_request = PageRequest.from_query(page, size, sort)
    result = await service.list_accounts(current_user, page_request)
    response.headers.update(generate_pagination_headers(request.url, result))
    return result.content


@router.get("/users/authorities", response_model=List[str], summary="역할 목록 조회")
async def read_authorities(
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    return UserAdministrationService.list_authorities()


@router.get("/users/{login}", response_model=usr_schemas.UserRead, summary="로그인 이름으로 계정 조회")
async def read_user(
    login: str = Path(..., pattern=usr_models.LOGIN_REGEX),
    service: UserAdministrationService = Depends(get_user_service),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    return await service.get_account(login)


@router.delete("/users/{login}", status_code=status.HTTP_204_NO_CONTENT, summary="계정 삭제")
async def delete_user(
    login: str = Path(..., pattern=usr_models.LOGIN_REGEX),
    service: UserAdministrationService = Depends(get_user_service),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    logger.debug("REST request to delete User: %s", login)
    await service.delete_account(login)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers=alert_headers("userManagement.deleted", login),
    )


# =============================================================================
# 3. 계정 수명 주기 (활성화, 비밀번호 재설정) 엔드포인트
# =============================================================================

@router.get("/account/activate", summary="활성화 키로 계정 활성화")
async def activate_account(
    key: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_session),
    dispatcher: NotificationDispatcher = Depends(deps.get_notification_dispatcher),
):
    db_user = await usr_crud.user.get_by_activation_key(db, key=key)
    if db_user is None:
        raise NotFoundError("No user was found for this activation key")

    db_user = await usr_crud.user.activate(db, db_obj=db_user)
    logger.info("Activated account '%s'", db_user.login)
    await dispatcher.send_activation_confirmation(db_user)
    return {"login": db_user.login, "activated": db_user.activated}


@router.post("/account/reset-password/init", summary="비밀번호 재설정 메일 요청")
async def request_password_reset(
    body: usr_schemas.ResetPasswordInit,
    db: AsyncSession = Depends(get_session),
    dispatcher: NotificationDispatcher = Depends(deps.get_notification_dispatcher),
):
    """
    등록되지 않은 이메일이어도 같은 응답을 돌려줍니다.
    """
    db_user = await usr_crud.user.get_by_email(db, email=body.email)
    if db_user is None:
        logger.warning("Password reset requested for non existing mail")
        return {"message": "Password reset requested"}

    db_user = await usr_crud.user.start_password_reset(db, db_obj=db_user)
    await dispatcher.send_password_reset_mail(db_user)
    return {"message": "Password reset requested"}


@router.post("/account/reset-password/finish", summary="재설정 키로 새 비밀번호 설정")
async def finish_password_reset(
    body: usr_schemas.ResetPasswordFinish,
    db: AsyncSession = Depends(get_session),
):
    db_user = await usr_crud.user.get_by_reset_key(db, key=body.key)
    if db_user is None or usr_crud.user.reset_key_expired(db_user):
        raise NotFoundError("No user was found for this reset key")

    db_user = await usr_crud.user.finish_password_reset(db, db_obj=db_user, new_password=body.new_password)
    logger.info("Password reset completed for account '%s'", db_user.login)
    return {"message": "Password changed"}
