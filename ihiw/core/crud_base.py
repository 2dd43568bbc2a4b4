# ihiw/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 메서드는 비동기(async) 세션을 사용합니다.
"""

from typing import Generic, List, Optional, Type, TypeVar, Any

from sqlalchemy import func
from sqlalchemy.sql import Select
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

from ihiw.core.errors import ValidationError
from ihiw.core.pagination import Page, PageRequest

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    # 정렬에 허용할 컬럼 이름. 비어 있으면 모델의 모든 컬럼을 허용합니다.
    sortable_fields: tuple = ()

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다."""
        return await db.get(self.model, id)

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = 100, **kwargs: Any
    ) -> List[ModelType]:
        """
        여러 레코드를 조회합니다. 필터링을 위한 키워드 인자를 지원합니다.
        """
        query = select(self.model)
        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)
        query = query.order_by(self.model.id).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalar_one_or_none()

    async def get_page(
        self, db: AsyncSession, *, statement: Select, page_request: Optional[PageRequest]
    ) -> Page[ModelType]:
        """
        주어진 select 구문을 페이지 단위로 실행합니다.
        page_request가 None이면 전체 목록(unpaged)을 반환합니다.
        """
        count_statement = select(func.count()).select_from(statement.order_by(None).subquery())
        total = (await db.execute(count_statement)).scalar_one()

        if page_request is None:
            result = await db.execute(statement.order_by(self.model.id))
            return Page(content=list(result.scalars().all()), total=total)

        column = self._sort_column(page_request.sort_field)
        ordered = statement.order_by(column.desc() if page_request.descending else column.asc())
        if page_request.sort_field != "id":
            # 동일 값 사이의 순서를 고정합니다.
            ordered = ordered.order_by(self.model.id)
        result = await db.execute(ordered.offset(page_request.offset).limit(page_request.size))
        return Page(content=list(result.scalars().all()), total=total, request=page_request)

    def _sort_column(self, field: str):
        allowed = self.sortable_fields or tuple(self.model.__table__.columns.keys())
        if field not in allowed:
            raise ValidationError(f"Cannot sort by '{field}'", entity_name="pagination", error_key="sortinvalid")
        return getattr(self.model, field)

