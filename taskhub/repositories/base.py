"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic Create, Read, Update, Soft-Delete operations with
organization scoping. Rows whose deleted_at is set are invisible to
every method here.

Usage:
    class ProjectRepository(BaseRepository[Project]):
        def __init__(self) -> None:
            super().__init__(Project, sortable=("code", "name", "created_at"))
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.database import Base, utcnow
from taskhub.utils.pagination import PageParams, paginate

# 제네릭 타입 변수: SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


def contains_ci(column: Any, term: str) -> Any:
    """대소문자 무시 부분 일치 — Case-insensitive "contains" with LIKE wildcards escaped."""
    return func.lower(column).contains(term.lower(), autoescape=True)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    All queries are scoped by organization_id when one is given and
    exclude soft-deleted rows when the model has a deleted_at column.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
        sortable: 정렬 허용 컬럼 이름 (Column names accepted as sort_by)
        load_options: eager loading 옵션 (Relationship loader options)
    """

    def __init__(
        self,
        model: type[ModelType],
        sortable: Sequence[str] = ("created_at",),
        load_options: Sequence[Any] = (),
    ) -> None:
        self.model: type[ModelType] = model
        self.sortable: tuple[str, ...] = tuple(sortable)
        # 조회 시 적용할 eager loading 옵션 (Loader options applied to fetched rows, never to COUNT)
        self.load_options: tuple[Any, ...] = tuple(load_options)

    def base_query(self, organization_id: UUID | None = None) -> Select:
        """조직 범위 + 소프트 삭제 제외 기본 쿼리.

        Base SELECT scoped to the organization and excluding soft-deleted rows.
        """
        query: Select = select(self.model)
        if organization_id is not None and hasattr(self.model, "organization_id"):
            query = query.where(self.model.organization_id == organization_id)
        if hasattr(self.model, "deleted_at"):
            query = query.where(self.model.deleted_at.is_(None))
        return query

    def apply_sort(self, query: Select, params: PageParams) -> Select:
        """정렬 적용 — Apply sort_by/sort_direction with an id tie-break.

        허용되지 않은 sort_by는 created_at으로 대체합니다
        (Unknown sort fields fall back to created_at).
        """
        sort_by: str = params.sort_by if params.sort_by in self.sortable else "created_at"
        column = getattr(self.model, sort_by)
        if params.sort_direction == "asc":
            return query.order_by(column.asc(), self.model.id.asc())
        return query.order_by(column.desc(), self.model.id.desc())

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
        organization_id: UUID | None = None,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single live record by its UUID.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)
            organization_id: 조직 범위 필터, None이면 조직 필터 미적용
                             (Organization scope filter; None skips org filtering)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = (
            self.base_query(organization_id)
            .options(*self.load_options)
            .where(self.model.id == record_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        params: PageParams,
    ) -> tuple[Sequence[ModelType], int]:
        """정렬과 페이지네이션을 적용하여 레코드 목록을 조회합니다.

        Apply sorting and pagination to a prepared query.

        Returns:
            tuple[Sequence[ModelType], int]: (레코드 목록, 전체 개수)
        """
        return await paginate(
            db, self.apply_sort(query, params), params.page, params.limit, options=self.load_options
        )

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record in the database.
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        update_data: dict[str, Any],
    ) -> ModelType:
        """기존 레코드를 업데이트합니다.

        Apply the given fields to an already loaded record.
        Pydantic exclude_unset으로 전달된 필드만 업데이트 (None 값도 허용)
        """
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def soft_delete(
        self,
        db: AsyncSession,
        db_obj: ModelType,
    ) -> None:
        """레코드를 소프트 삭제합니다 — Mark a record deleted via deleted_at."""
        db_obj.deleted_at = utcnow()
        await db.flush()

    async def soft_delete_where(
        self,
        db: AsyncSession,
        *criteria: Any,
    ) -> None:
        """조건에 맞는 레코드 일괄 소프트 삭제 — Bulk soft delete of live rows matching criteria."""
        now = utcnow()
        stmt = (
            update(self.model)
            .where(self.model.deleted_at.is_(None), *criteria)
            .values(deleted_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        await db.execute(stmt)
        await db.flush()

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
        organization_id: UUID | None = None,
        exclude_id: UUID | None = None,
    ) -> bool:
        """주어진 조건에 일치하는 살아있는 레코드가 존재하는지 확인합니다.

        Check if a live record matching the given filters exists.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: 검색 조건 딕셔너리 (Filter criteria dictionary)
            organization_id: 조직 범위 필터 (Organization scope filter)
            exclude_id: 제외할 레코드 ID — 수정 시 자기 자신 제외 (Record to ignore, used on update)

        Returns:
            bool: 레코드 존재 여부 (Whether a matching record exists)
        """
        query: Select = select(func.count()).select_from(self.model)
        if organization_id is not None and hasattr(self.model, "organization_id"):
            query = query.where(self.model.organization_id == organization_id)
        if hasattr(self.model, "deleted_at"):
            query = query.where(self.model.deleted_at.is_(None))
        for column_name, value in filters.items():
            if hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)

        count: int = (await db.execute(query)).scalar() or 0
        return count > 0
