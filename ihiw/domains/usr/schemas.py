# ihiw/domains/usr/schemas.py

"""
'usr' 도메인 (계정 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import re
from typing import Optional, List
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, EmailStr, field_validator

from . import models as usr_models


# =============================================================================
# 1. 계정 (User) 스키마
# =============================================================================
class UserBase(SQLModel):
    """계정 정보의 기본 필드를 정의하는 스키마"""
    login: str = Field(..., min_length=1, max_length=50)
    email: EmailStr = Field(..., max_length=254)
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    lang_key: Optional[str] = Field(None, min_length=2, max_length=10)


class UserInput(UserBase):
    """
    생성/수정 요청의 공통 검증. 조회 응답(UserRead)에는 적용하지 않습니다.
    """

    @field_validator("login")
    @classmethod
    def check_login_pattern(cls, v: str) -> str:
        if not re.match(usr_models.LOGIN_REGEX, v):
            raise ValueError("login contains characters that are not allowed")
        return v


class UserCreate(UserInput):
    """
    관리자의 계정 생성 요청 스키마.
    id가 포함되면 생성 요청이 거부됩니다. 비밀번호는 받지 않습니다. (재설정 메일로 설정)
    """
    id: Optional[int] = None
    authorities: Optional[List[usr_models.Authority]] = None
    lab_id: Optional[int] = Field(None, description="소속시킬 실험실 ID (선택)")
    phone: Optional[str] = Field(None, max_length=50)


class UserUpdate(UserInput):
    """계정 수정 요청 스키마. 대상은 id로 식별합니다."""
    id: int
    activated: Optional[bool] = None
    authorities: Optional[List[usr_models.Authority]] = None

    @field_validator("authorities")
    @classmethod
    def check_authorities_not_empty(cls, v):
        if v is not None and len(v) == 0:
            raise ValueError("authorities must not be empty")
        return v


class UserRead(UserBase):
    """
    계정 조회 스키마.
    비밀번호 해시, 활성화/재설정 키 등 민감한 정보는 제외됩니다.
    """
    id: int
    email: str
    activated: bool
    authorities: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# 2. 인증 토큰 (Token) 스키마
# =============================================================================
class Token(BaseModel):
    """JWT 토큰 응답 스키마"""
    access_token: str
    token_type: str


# =============================================================================
# 3. 계정 수명 주기 스키마
# =============================================================================
class ResetPasswordInit(BaseModel):
    email: EmailStr


class ResetPasswordFinish(BaseModel):
    key: str = Field(..., min_length=1, max_length=20)
    new_password: str = Field(..., min_length=8, max_length=100)
