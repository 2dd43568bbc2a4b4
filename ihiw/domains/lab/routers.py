# ihiw/domains/lab/routers.py

"""
'lab' 도메인 (실험실, 프로젝트)의 API 엔드포인트를 정의하는 모듈입니다.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlmodel.ext.asyncio.session import AsyncSession

from ihiw.core.database import get_session
from ihiw.core import dependencies as deps
from ihiw.core.errors import ForbiddenError, NotFoundError, alert_headers
from ihiw.domains.usr import crud as usr_crud
from ihiw.domains.usr import models as usr_models
from ihiw.domains.usr import permissions
from ihiw.services.notification import NotificationDispatcher

from . import crud as lab_crud
from . import schemas as lab_schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Lab & Project (실험실 및 프로젝트)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 실험실 (Lab) 엔드포인트
# =============================================================================

@router.get("/labs", response_model=List[lab_schemas.LabRead], summary="실험실 목록 조회")
async def read_labs(
    db: AsyncSession = Depends(get_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    return await lab_crud.lab.get_multi(db, limit=None)


# =============================================================================
# 2. 프로젝트 (Project) 엔드포인트
# =============================================================================

@router.get("/projects/{project_id}", response_model=lab_schemas.ProjectReadWithLabs, summary="프로젝트 조회")
async def read_project(
    project_id: int,
    db: AsyncSession = Depends(get_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    db_project = await lab_crud.project.get(db, project_id)
    if not db_project:
        raise NotFoundError("Project not found")
    labs = await lab_crud.project.get_labs(db, project_id=project_id)
    return lab_schemas.ProjectReadWithLabs(
        **lab_schemas.ProjectRead.model_validate(db_project).model_dump(),
        labs=[lab_schemas.LabRead.model_validate(lab) for lab in labs],
    )


@router.post(
    "/projects/{project_id}/labs/{lab_id}",
    response_model=lab_schemas.ProjectReadWithLabs,
    summary="실험실을 프로젝트에 구독",
)
async def subscribe_lab(
    project_id: int,
    lab_id: int,
    response: Response,
    db: AsyncSession = Depends(get_session),
    dispatcher: NotificationDispatcher = Depends(deps.get_notification_dispatcher),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """
    관리자, 또는 해당 실험실의 PI만 구독할 수 있습니다.
    새로 구독된 경우 프로젝트 생성자에게 알림 메일을 보냅니다.
    """
    db_project = await lab_crud.project.get(db, project_id)
    if not db_project:
        raise NotFoundError("Project not found")
    db_lab = await lab_crud.lab.get(db, lab_id)
    if not db_lab:
        raise NotFoundError("Lab not found")

    caller_lab_id = await usr_crud.lab_profile.get_lab_id_for_user(db, user_id=current_user.id)
    if not permissions.can_manage_account(current_user.authorities, caller_lab_id, lab_id):
        raise ForbiddenError("Not allowed to subscribe this lab", entity_name="project")

    project_name = db_project.name
    if await lab_crud.project.add_lab(db, project_id=project_id, lab_id=lab_id):
        logger.info("Lab '%s' subscribed to project '%s'", db_lab.code, project_name)
        creator = await lab_crud.project.get_creator_account(db, db_obj=db_project)
        if creator is not None:
            await dispatcher.send_subscription_notification(creator, db_lab, db_project)
    else:
        logger.debug("Lab '%s' already subscribed to project '%s'", db_lab.code, project_name)

    response.headers.update(alert_headers("project.subscribed", db_lab.code))
    return await read_project(project_id, db=db, current_user=current_user)
