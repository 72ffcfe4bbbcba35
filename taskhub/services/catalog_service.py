"""카탈로그 서비스 — 작업 상태 및 우선순위 CRUD 비즈니스 로직.

Catalog Service — CRUD for task statuses and task priorities.
Codes are unique per organization among live rows. One service class is
instantiated once per catalog table.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.catalog import TaskPriority, TaskStatus
from taskhub.repositories.catalog_repository import (
    CatalogRepository,
    task_priority_repository,
    task_status_repository,
)
from taskhub.schemas.catalog import CatalogCreate, CatalogResponse, CatalogUpdate
from taskhub.utils.exceptions import DuplicateError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page


def catalog_to_response(item: TaskStatus | TaskPriority) -> CatalogResponse:
    """카탈로그 모델을 응답 스키마로 변환합니다."""
    return CatalogResponse(
        id=str(item.id),
        organization_id=str(item.organization_id),
        code=item.code,
        name=item.name,
        description=item.description,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


class CatalogService:
    """작업 상태/우선순위 비즈니스 로직을 처리하는 서비스.

    Attributes:
        repository: 대상 카탈로그 레포지토리 (Repository of the catalog table)
        label: 오류 메시지용 이름 (Name used in error messages, e.g. "Task status")
    """

    def __init__(self, repository: CatalogRepository, label: str) -> None:
        self.repository: CatalogRepository = repository
        self.label: str = label

    async def get_entity(
        self,
        db: AsyncSession,
        item_id: UUID,
        organization_id: UUID,
    ) -> TaskStatus | TaskPriority:
        """조직 내 항목 조회 — 없으면 404 (also used to validate task references)."""
        item = await self.repository.get_by_id(db, item_id, organization_id)
        if item is None:
            raise NotFoundError(f"{self.label} not found")
        return item

    async def list_items(
        self,
        db: AsyncSession,
        organization_id: UUID,
        params: PageParams,
        code: str | None = None,
        name: str | None = None,
    ) -> dict[str, Any]:
        """항목 목록 조회 — Paginated catalog rows."""
        items, total = await self.repository.search(db, organization_id, params, code=code, name=name)
        return build_page([catalog_to_response(i) for i in items], total, params)

    async def get_item(
        self,
        db: AsyncSession,
        item_id: UUID,
        organization_id: UUID,
    ) -> CatalogResponse:
        return catalog_to_response(await self.get_entity(db, item_id, organization_id))

    async def create_item(
        self,
        db: AsyncSession,
        organization_id: UUID,
        data: CatalogCreate,
    ) -> CatalogResponse:
        """새 항목을 생성합니다.

        Raises:
            DuplicateError: 같은 코드가 이미 존재할 때 (Code already used in the tenant)
        """
        if await self.repository.exists(db, {"code": data.code}, organization_id):
            raise DuplicateError(f"{self.label} code already exists")
        item = await self.repository.create(
            db,
            {
                "organization_id": organization_id,
                "code": data.code,
                "name": data.name,
                "description": data.description,
            },
        )
        return catalog_to_response(item)

    async def update_item(
        self,
        db: AsyncSession,
        item_id: UUID,
        organization_id: UUID,
        data: CatalogUpdate,
    ) -> CatalogResponse:
        """항목을 수정합니다 (부분 업데이트).

        Raises:
            NotFoundError: 항목을 찾을 수 없을 때
            DuplicateError: 변경할 코드가 이미 존재할 때
        """
        item = await self.get_entity(db, item_id, organization_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        for required in ("code", "name"):
            if update_data.get(required, "") is None:
                update_data.pop(required)

        new_code: str | None = update_data.get("code")
        if new_code is not None and new_code != item.code:
            if await self.repository.exists(db, {"code": new_code}, organization_id, exclude_id=item.id):
                raise DuplicateError(f"{self.label} code already exists")

        item = await self.repository.update(db, item, update_data)
        return catalog_to_response(item)

    async def delete_item(
        self,
        db: AsyncSession,
        item_id: UUID,
        organization_id: UUID,
    ) -> None:
        """항목을 소프트 삭제합니다 — 이를 참조하는 작업은 그대로 유지.

        Soft-delete a catalog row. Tasks keep their reference; summaries then
        report no status/priority name for it.
        """
        item = await self.get_entity(db, item_id, organization_id)
        await self.repository.soft_delete(db, item)


# 싱글턴 인스턴스: Singleton instances
task_status_service: CatalogService = CatalogService(task_status_repository, "Task status")
task_priority_service: CatalogService = CatalogService(task_priority_repository, "Task priority")
