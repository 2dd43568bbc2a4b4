# ihiw/domains/usr/services.py

"""
계정 관리 서비스 모듈입니다.

관리자/PI 권한 판단, 실험실 단위 조회 범위, 로그인/이메일 중복 검사, 알림 발송을
하나의 흐름으로 묶습니다. 라우터는 요청 경계 검사(인증, 관리자 여부)만 담당하고
나머지 규칙은 모두 여기서 적용합니다.
"""

import logging
from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw.core.errors import (
    EmailConflictError,
    ForbiddenError,
    LoginConflictError,
    NotFoundError,
    ValidationError,
)
from ihiw.core.pagination import Page, PageRequest
from ihiw.domains.lab import models as lab_models
from ihiw.services.notification import NotificationDispatcher
from . import crud as usr_crud
from . import models as usr_models
from . import permissions
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


class UserAdministrationService:
    """
    Args:
        db: 요청 단위 비동기 세션
        dispatcher: 알림 디스패처. 발송 실패는 결과에 영향을 주지 않습니다.
    """

    def __init__(self, db: AsyncSession, dispatcher: NotificationDispatcher):
        self.db = db
        self.dispatcher = dispatcher

    # -------------------------------------------------------------------------
    # 생성
    # -------------------------------------------------------------------------
    async def create_account(self, obj_in: usr_schemas.UserCreate) -> usr_models.User:
        if obj_in.id is not None:
            raise ValidationError("A new user cannot already have an ID")
        if await usr_crud.user.get_by_login(self.db, login=obj_in.login):
            raise LoginConflictError()
        if await usr_crud.user.get_by_email(self.db, email=obj_in.email):
            raise EmailConflictError()
        if obj_in.lab_id is not None and await self.db.get(lab_models.Lab, obj_in.lab_id) is None:
            raise ValidationError(f"Lab {obj_in.lab_id} does not exist", error_key="labnotfound")

        authorities = sorted({a.value for a in obj_in.authorities}) if obj_in.authorities else [
            usr_models.Authority.USER.value
        ]
        db_user = await usr_crud.user.create(
            self.db, obj_in=obj_in, authorities=authorities, lab_id=obj_in.lab_id
        )
        logger.info("Created account '%s' with authorities %s", db_user.login, authorities)

        await self.dispatcher.send_creation_email(db_user)
        return db_user

    # -------------------------------------------------------------------------
    # 수정
    # -------------------------------------------------------------------------
    async def update_account(
        self, caller: usr_models.User, obj_in: usr_schemas.UserUpdate
    ) -> usr_models.User:
        target = await usr_crud.user.get(self.db, obj_in.id)
        if target is None:
            raise NotFoundError(f"User {obj_in.id} not found")

        caller_authorities = caller.authorities or []
        caller_lab_id = None
        target_lab_id = None
        if not permissions.is_admin(caller_authorities):
            caller_lab_id = await usr_crud.lab_profile.get_lab_id_for_user(self.db, user_id=caller.id)
            target_lab_id = await usr_crud.lab_profile.get_lab_id_for_user(self.db, user_id=target.id)

        if not permissions.can_manage_account(caller_authorities, caller_lab_id, target_lab_id):
            logger.info("User '%s' may not modify account '%s'", caller.login, target.login)
            raise ForbiddenError()

        existing = await usr_crud.user.get_by_email(self.db, email=obj_in.email)
        if existing is not None and existing.id != obj_in.id:
            raise EmailConflictError()
        existing = await usr_crud.user.get_by_login(self.db, login=obj_in.login)
        if existing is not None and existing.id != obj_in.id:
            raise LoginConflictError()

        requested = [a.value for a in obj_in.authorities] if obj_in.authorities else None
        if requested is not None and not permissions.is_admin(caller_authorities):
            if sorted(requested) != sorted(target.authorities or []):
                logger.warning(
                    "User '%s' tried to change authorities of '%s' to %s; request ignored",
                    caller.login, target.login, requested,
                )
        authorities = permissions.resolve_authorities(caller_authorities, requested, target.authorities)

        updated = await usr_crud.user.update_account(
            self.db, db_obj=target, obj_in=obj_in, authorities=authorities
        )
        logger.info("Changed information for account '%s'", updated.login)
        return updated

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------
    async def list_accounts(
        self, caller: usr_models.User, page_request: Optional[PageRequest]
    ) -> Page[usr_models.User]:
        caller_lab_id = None
        if not permissions.is_admin(caller.authorities):
            caller_lab_id = await usr_crud.lab_profile.get_lab_id_for_user(self.db, user_id=caller.id)
        scope = permissions.listing_scope(caller.authorities, caller_lab_id)

        User = usr_models.User
        statement = select(User).where(User.login != usr_models.ANONYMOUS_USER)
        if scope is permissions.ListingScope.NONE:
            return Page.empty(page_request)
        if scope is permissions.ListingScope.LAB:
            statement = statement.join(
                usr_models.LabProfile, usr_models.LabProfile.user_id == User.id
            ).where(usr_models.LabProfile.lab_id == caller_lab_id)

        return await usr_crud.user.get_page(self.db, statement=statement, page_request=page_request)

    async def get_account(self, login: str) -> usr_models.User:
        db_user = await usr_crud.user.get_by_exact_login(self.db, login=login)
        if db_user is None:
            raise NotFoundError(f"User '{login}' not found")
        return db_user

    # -------------------------------------------------------------------------
    # 삭제
    # -------------------------------------------------------------------------
    async def delete_account(self, login: str) -> None:
        """대상이 없어도 성공으로 처리합니다."""
        if await usr_crud.user.delete_by_login(self.db, login=login):
            logger.info("Deleted account '%s'", login)
        else:
            logger.debug("Account '%s' already absent", login)

    @staticmethod
    def list_authorities() -> List[str]:
        return [a.value for a in usr_models.Authority]
