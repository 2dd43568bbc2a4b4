# ihiw/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 작업을 담당하는 모듈입니다.

- 로그인 이름과 이메일은 소문자로 저장하고, 조회도 소문자 기준으로 합니다.
- 중복 검사는 서비스 계층에서 먼저 수행하며, 동시 생성으로 인한 무결성 오류는 여기서 충돌 오류로 변환합니다.
"""

import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw.core.config import settings
from ihiw.core.crud_base import CRUDBase
from ihiw.core.errors import EmailConflictError, LoginConflictError
from ihiw.core.security import generate_random_key, get_password_hash, verify_password
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. users 테이블 CRUD
# =============================================================================
class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserUpdate]):
    sortable_fields = (
        "id", "login", "email", "first_name", "last_name",
        "activated", "lang_key", "created_at", "updated_at",
    )

    def __init__(self):
        super().__init__(model=usr_models.User)

    async def get_by_login(self, db: AsyncSession, *, login: str) -> Optional[usr_models.User]:
        """저장된 로그인 이름(소문자)으로 계정을 조회합니다."""
        return await self.get_by_attribute(db, attribute="login", value=login.lower())

    async def get_by_exact_login(self, db: AsyncSession, *, login: str) -> Optional[usr_models.User]:
        """저장된 값과 정확히 일치하는 로그인 이름으로 조회합니다. (대소문자 구분)"""
        return await self.get_by_attribute(db, attribute="login", value=login)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """이메일로 계정을 조회합니다. (대소문자 무시)"""
        statement = select(self.model).where(func.lower(self.model.email) == email.lower())
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_by_activation_key(self, db: AsyncSession, *, key: str) -> Optional[usr_models.User]:
        return await self.get_by_attribute(db, attribute="activation_key", value=key)

    async def get_by_reset_key(self, db: AsyncSession, *, key: str) -> Optional[usr_models.User]:
        return await self.get_by_attribute(db, attribute="reset_key", value=key)

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: usr_schemas.UserCreate,
        authorities: list,
        lab_id: Optional[int] = None,
    ) -> usr_models.User:
        """
        비활성 계정을 생성합니다. 임의의 비밀번호와 활성화/재설정 키를 발급합니다.
        lab_id가 주어지면 같은 트랜잭션에서 실험실 프로필도 만듭니다.
        """
        db_user = usr_models.User(
            login=obj_in.login.lower(),
            email=obj_in.email.lower(),
            first_name=obj_in.first_name,
            last_name=obj_in.last_name,
            lang_key=obj_in.lang_key or settings.DEFAULT_LANG_KEY,
            password_hash=get_password_hash(generate_random_key(60)),
            activated=False,
            activation_key=generate_random_key(),
            reset_key=generate_random_key(),
            reset_date=datetime.now(UTC),
            authorities=authorities,
        )
        db.add(db_user)
        try:
            await db.flush()
            if lab_id is not None or obj_in.phone is not None:
                db.add(usr_models.LabProfile(user_id=db_user.id, lab_id=lab_id, phone=obj_in.phone))
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Account insert rejected by the store: %s", e.orig)
            # 동시 생성 경쟁에서 진 경우. 어느 쪽이 충돌했는지 다시 확인합니다.
            if await self.get_by_login(db, login=obj_in.login):
                raise LoginConflictError()
            raise EmailConflictError()

        await db.refresh(db_user)
        return db_user

    async def update_account(
        self,
        db: AsyncSession,
        *,
        db_obj: usr_models.User,
        obj_in: usr_schemas.UserUpdate,
        authorities: list,
    ) -> usr_models.User:
        """
        계정의 기본 속성과 역할 목록을 갱신합니다. 비밀번호와 키는 변경하지 않습니다.
        """
        db_obj.login = obj_in.login.lower()
        db_obj.email = obj_in.email.lower()
        db_obj.first_name = obj_in.first_name
        db_obj.last_name = obj_in.last_name
        if obj_in.lang_key is not None:
            db_obj.lang_key = obj_in.lang_key
        if obj_in.activated is not None:
            db_obj.activated = obj_in.activated
        db_obj.authorities = list(authorities)

        db.add(db_obj)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Account update rejected by the store: %s", e.orig)
            existing = await self.get_by_login(db, login=obj_in.login)
            if existing is not None and existing.id != obj_in.id:
                raise LoginConflictError()
            raise EmailConflictError()
        await db.refresh(db_obj)
        return db_obj

    async def activate(self, db: AsyncSession, *, db_obj: usr_models.User) -> usr_models.User:
        db_obj.activated = True
        db_obj.activation_key = None
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def start_password_reset(self, db: AsyncSession, *, db_obj: usr_models.User) -> usr_models.User:
        db_obj.reset_key = generate_random_key()
        db_obj.reset_date = datetime.now(UTC)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    def reset_key_expired(self, db_obj: usr_models.User, now: Optional[datetime] = None) -> bool:
        if db_obj.reset_date is None:
            return True
        reset_date = db_obj.reset_date
        if reset_date.tzinfo is None:
            # SQLite는 시간대 정보 없이 돌려줍니다.
            reset_date = reset_date.replace(tzinfo=UTC)
        now = now or datetime.now(UTC)
        return reset_date < now - timedelta(hours=settings.RESET_KEY_VALID_HOURS)

    async def finish_password_reset(
        self, db: AsyncSession, *, db_obj: usr_models.User, new_password: str
    ) -> usr_models.User:
        db_obj.password_hash = get_password_hash(new_password)
        db_obj.reset_key = None
        db_obj.reset_date = None
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def delete_by_login(self, db: AsyncSession, *, login: str) -> bool:
        """
        로그인 이름으로 계정과 실험실 프로필을 삭제합니다. 대상이 없으면 False를 반환합니다.
        """
        db_user = await self.get_by_exact_login(db, login=login)
        if db_user is None:
            return False
        await db.execute(delete(usr_models.LabProfile).where(usr_models.LabProfile.user_id == db_user.id))
        await db.execute(delete(usr_models.User).where(usr_models.User.id == db_user.id))
        await db.commit()
        return True

    async def authenticate(self, db: AsyncSession, *, login: str, password: str) -> Optional[usr_models.User]:
        """로그인 이름과 비밀번호로 계정을 인증합니다. 활성화 여부는 호출 측에서 확인합니다."""
        db_user = await self.get_by_login(db, login=login)
        if not db_user:
            return None
        if not verify_password(password, db_user.password_hash):
            return None
        return db_user


user = CRUDUser()


# =============================================================================
# 2. lab_profiles 테이블 CRUD
# =============================================================================
class CRUDLabProfile(CRUDBase[usr_models.LabProfile, usr_models.LabProfile, usr_models.LabProfile]):
    def __init__(self):
        super().__init__(model=usr_models.LabProfile)

    async def get_by_user_id(self, db: AsyncSession, *, user_id: int) -> Optional[usr_models.LabProfile]:
        return await self.get_by_attribute(db, attribute="user_id", value=user_id)

    async def get_lab_id_for_user(self, db: AsyncSession, *, user_id: Optional[int]) -> Optional[int]:
        """계정이 속한 실험실 ID. 프로필이나 실험실이 없으면 None."""
        if user_id is None:
            return None
        statement = select(self.model.lab_id).where(self.model.user_id == user_id)
        result = await db.execute(statement)
        return result.scalars().first()


lab_profile = CRUDLabProfile()
