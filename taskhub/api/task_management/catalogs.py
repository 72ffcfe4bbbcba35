"""작업 상태/우선순위 라우터 — 두 카탈로그가 같은 엔드포인트 구성을 공유.

Task status and priority routers. Both catalogs expose the same
endpoints, so one factory builds a router per catalog service.

Permission Matrix:
    - 목록/상세 조회: 모든 역할 (Every role)
    - 생성/수정/삭제: 관리자 (tpm, pm, pmo)
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user, require_manager
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.catalog import CatalogCreate, CatalogResponse, CatalogUpdate
from taskhub.services.catalog_service import CatalogService, task_priority_service, task_status_service
from taskhub.utils.pagination import Page, PageParams


def build_catalog_router(service: CatalogService) -> APIRouter:
    """카탈로그 서비스용 CRUD 라우터를 생성합니다.

    Build the index/get/create/update/delete router for one catalog.
    """
    router: APIRouter = APIRouter()

    @router.get("", response_model=Page[CatalogResponse])
    async def list_items(
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(get_current_user)],
        params: Annotated[PageParams, Depends()],
        code: Annotated[str | None, Query()] = None,
        name: Annotated[str | None, Query()] = None,
    ) -> dict[str, Any]:
        return await service.list_items(db, current_user.organization_id, params, code=code, name=name)

    @router.get("/{item_id}", response_model=CatalogResponse)
    async def get_item(
        item_id: UUID,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> CatalogResponse:
        return await service.get_item(db, item_id, current_user.organization_id)

    @router.post("", response_model=CatalogResponse, status_code=201)
    async def create_item(
        data: CatalogCreate,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_manager)],
    ) -> CatalogResponse:
        result: CatalogResponse = await service.create_item(db, current_user.organization_id, data)
        await db.commit()
        return result

    @router.put("/{item_id}", response_model=CatalogResponse)
    async def update_item(
        item_id: UUID,
        data: CatalogUpdate,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_manager)],
    ) -> CatalogResponse:
        result: CatalogResponse = await service.update_item(db, item_id, current_user.organization_id, data)
        await db.commit()
        return result

    @router.delete("/{item_id}", status_code=204)
    async def delete_item(
        item_id: UUID,
        db: Annotated[AsyncSession, Depends(get_db)],
        current_user: Annotated[User, Depends(require_manager)],
    ) -> None:
        await service.delete_item(db, item_id, current_user.organization_id)
        await db.commit()

    return router


task_statuses_router: APIRouter = build_catalog_router(task_status_service)
priorities_router: APIRouter = build_catalog_router(task_priority_service)
