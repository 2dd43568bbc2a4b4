# ihiw/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- users: 로그인/이메일/권한/활성화 상태를 가진 계정 테이블.
- lab_profiles: 계정과 1:1로 연결되어 소속 실험실(lab)을 가리키는 확장 프로필.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey, Integer, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

if TYPE_CHECKING:
    from ihiw.domains.lab.models import Lab


# 로그인 이름에 허용되는 문자. 요청 본문 검증과 경로 파라미터 검증에 동일하게 사용합니다.
LOGIN_REGEX = r"^[_.@A-Za-z0-9-]+$"

# 목록 조회에서 항상 제외되는 예약 계정
ANONYMOUS_USER = "anonymoususer"


class Authority(str, Enum):
    """
    시스템이 알고 있는 역할 태그의 닫힌 집합입니다.
    DB에는 문자열 값(ROLE_*)으로 저장됩니다.
    """
    ADMIN = "ROLE_ADMIN"
    PI = "ROLE_PI"
    USER = "ROLE_USER"


# =============================================================================
# 1. users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    login: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="로그인 이름 (소문자로 저장)")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")
    first_name: Optional[str] = Field(default=None, max_length=50, description="이름")
    last_name: Optional[str] = Field(default=None, max_length=50, description="성")
    email: str = Field(max_length=254, sa_column_kwargs={"unique": True}, description="이메일 (소문자로 저장)")
    activated: bool = Field(default=False, description="계정 활성화 여부")
    lang_key: Optional[str] = Field(default=None, max_length=10, description="선호 언어 (예: en, de)")
    activation_key: Optional[str] = Field(default=None, max_length=20, description="활성화 키")
    reset_key: Optional[str] = Field(default=None, max_length=20, description="비밀번호 재설정 키")
    reset_date: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="재설정 키 발급 일시"
    )
    authorities: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False),
        description="권한 태그 목록 (예: ['ROLE_ADMIN'])"
    )

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


class User(UserBase, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"

    lab_profile: Optional["LabProfile"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"uselist": False, "passive_deletes": True}
    )

    def has_authority(self, authority: Authority) -> bool:
        return authority.value in (self.authorities or [])


# =============================================================================
# 2. lab_profiles 테이블 모델
# =============================================================================
class LabProfileBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="실험실 프로필 고유 ID")
    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        description="소유 계정 ID (FK, 1:1)"
    )
    lab_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("labs.id", ondelete="SET NULL"), nullable=True),
        description="소속 실험실 ID (FK)"
    )
    phone: Optional[str] = Field(default=None, max_length=50, description="연락처")


class LabProfile(LabProfileBase, table=True):
    """
    lab_profiles 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "lab_profiles"

    user: Optional["User"] = Relationship(back_populates="lab_profile")
    lab: Optional["Lab"] = Relationship(back_populates="members")
