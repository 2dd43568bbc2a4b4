# ihiw/domains/lab/models.py

"""
'lab' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- labs: 실험실 (코드 필수, 연락처 정보)
- project_labs: 프로젝트와 실험실의 다대다 연결 테이블
- projects: 실험실을 묶는 프로젝트 (생성/수정자는 실험실 프로필을 참조)
- uploads: 실험실 프로필이 제출한 파일(HAML, HML) 기록
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey, Integer
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

if TYPE_CHECKING:
    from ihiw.domains.usr.models import LabProfile


class UploadType(str, Enum):
    HAML = "HAML"
    HML = "HML"


# =============================================================================
# 1. project_labs 연결 테이블
# =============================================================================
class ProjectLab(SQLModel, table=True):
    __tablename__ = "project_labs"

    project_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    )
    lab_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("labs.id", ondelete="CASCADE"), primary_key=True)
    )


# =============================================================================
# 2. labs 테이블
# =============================================================================
class Lab(SQLModel, table=True):
    __tablename__ = "labs"

    id: Optional[int] = Field(default=None, primary_key=True, description="실험실 고유 ID")
    code: str = Field(max_length=20, sa_column_kwargs={"unique": True}, description="실험실 코드 (필수)")
    name: Optional[str] = Field(default=None, max_length=255, description="실험실명")
    department: Optional[str] = Field(default=None, max_length=255)
    institution: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=254)
    url: Optional[str] = Field(default=None, max_length=255)

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )

    members: List["LabProfile"] = Relationship(back_populates="lab")
    projects: List["Project"] = Relationship(back_populates="labs", link_model=ProjectLab)


# =============================================================================
# 3. projects 테이블
# =============================================================================
class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True, description="프로젝트 고유 ID")
    name: str = Field(max_length=255, description="프로젝트명")
    description: Optional[str] = Field(default=None, description="설명")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    modified_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )
    created_by_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("lab_profiles.id", ondelete="SET NULL"), nullable=True),
        description="생성한 실험실 프로필 ID"
    )
    modified_by_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("lab_profiles.id", ondelete="SET NULL"), nullable=True),
        description="마지막으로 수정한 실험실 프로필 ID"
    )

    created_by: Optional["LabProfile"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Project.created_by_id]"}
    )
    modified_by: Optional["LabProfile"] = Relationship(
        sa_relationship_kwargs={"foreign_keys": "[Project.modified_by_id]"}
    )
    labs: List["Lab"] = Relationship(back_populates="projects", link_model=ProjectLab)


# =============================================================================
# 4. uploads 테이블
# =============================================================================
class Upload(SQLModel, table=True):
    __tablename__ = "uploads"

    id: Optional[int] = Field(default=None, primary_key=True, description="업로드 고유 ID")
    type: UploadType = Field(description="파일 유형 (HAML, HML)")
    file_name: Optional[str] = Field(default=None, max_length=255, description="저장된 파일명")
    valid: bool = Field(default=False, description="검증 통과 여부")
    enabled: bool = Field(default=True, description="사용 여부")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
    )
    modified_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
    )
    created_by_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("lab_profiles.id", ondelete="SET NULL"), nullable=True),
        description="제출한 실험실 프로필 ID"
    )

    created_by: Optional["LabProfile"] = Relationship()
