# ihiw/domains/lab/crud.py

"""
'lab' 도메인의 CRUD 작업을 담당하는 모듈입니다.
관계 속성은 비동기 세션에서 지연 로딩되지 않으므로 연결 테이블을 직접 조회합니다.
"""

from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw.core.crud_base import CRUDBase
from ihiw.domains.usr import models as usr_models
from . import models as lab_models


# =============================================================================
# 1. labs 테이블 CRUD
# =============================================================================
class CRUDLab(CRUDBase[lab_models.Lab, lab_models.Lab, lab_models.Lab]):
    def __init__(self):
        super().__init__(model=lab_models.Lab)


lab = CRUDLab()


# =============================================================================
# 2. projects 테이블 CRUD
# =============================================================================
class CRUDProject(CRUDBase[lab_models.Project, lab_models.Project, lab_models.Project]):
    def __init__(self):
        super().__init__(model=lab_models.Project)

    async def get_labs(self, db: AsyncSession, *, project_id: int) -> List[lab_models.Lab]:
        """프로젝트를 구독한 실험실 목록 (코드 순)"""
        statement = (
            select(lab_models.Lab)
            .join(lab_models.ProjectLab, lab_models.ProjectLab.lab_id == lab_models.Lab.id)
            .where(lab_models.ProjectLab.project_id == project_id)
            .order_by(lab_models.Lab.code)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def add_lab(self, db: AsyncSession, *, project_id: int, lab_id: int) -> bool:
        """
        실험실을 프로젝트에 구독시킵니다. 이미 구독 중이면 아무것도 하지 않고 False를 반환합니다.
        """
        link = await db.get(lab_models.ProjectLab, (project_id, lab_id))
        if link is not None:
            return False
        db.add(lab_models.ProjectLab(project_id=project_id, lab_id=lab_id))
        await db.commit()
        return True

    async def get_creator_account(
        self, db: AsyncSession, *, db_obj: lab_models.Project
    ) -> Optional[usr_models.User]:
        """프로젝트를 만든 실험실 프로필의 계정. 없으면 None."""
        if db_obj.created_by_id is None:
            return None
        statement = (
            select(usr_models.User)
            .join(usr_models.LabProfile, usr_models.LabProfile.user_id == usr_models.User.id)
            .where(usr_models.LabProfile.id == db_obj.created_by_id)
        )
        result = await db.execute(statement)
        return result.scalars().first()


project = CRUDProject()
