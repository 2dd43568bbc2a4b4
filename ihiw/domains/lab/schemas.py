# ihiw/domains/lab/schemas.py

"""
'lab' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime
from sqlmodel import SQLModel


class LabRead(SQLModel):
    id: int
    code: str
    name: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None


class ProjectRead(SQLModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    created_by_id: Optional[int] = None
    modified_by_id: Optional[int] = None


class ProjectReadWithLabs(ProjectRead):
    """프로젝트 조회 시 구독한 실험실 목록까지 함께 반환하는 스키마"""
    labs: List[LabRead] = []
