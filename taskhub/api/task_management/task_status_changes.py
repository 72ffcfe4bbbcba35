"""작업 상태 변경 라우터 — /tasks/{task_id}/status-changes.

Task Status Change Router. Every role may record a change; the author or
a manager may edit or delete history entries.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.common import UTCDateTime
from taskhub.schemas.task import StatusChangeCreate, StatusChangeResponse, StatusChangeUpdate
from taskhub.services.task_status_change_service import task_status_change_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("/{task_id}/status-changes", response_model=Page[StatusChangeResponse])
async def list_status_changes(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    new_status_id: Annotated[UUID | None, Query()] = None,
    changed_by_id: Annotated[UUID | None, Query()] = None,
    changed_from: Annotated[UTCDateTime | None, Query()] = None,
    changed_to: Annotated[UTCDateTime | None, Query()] = None,
) -> dict[str, Any]:
    return await task_status_change_service.list_status_changes(
        db,
        task_id,
        current_user.organization_id,
        params,
        new_status_id=new_status_id,
        changed_by_id=changed_by_id,
        changed_from=changed_from,
        changed_to=changed_to,
    )


@router.get("/{task_id}/status-changes/{change_id}", response_model=StatusChangeResponse)
async def get_status_change(
    task_id: UUID,
    change_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> StatusChangeResponse:
    return await task_status_change_service.get_status_change(
        db, task_id, change_id, current_user.organization_id
    )


@router.post("/{task_id}/status-changes", response_model=StatusChangeResponse, status_code=201)
async def create_status_change(
    task_id: UUID,
    data: StatusChangeCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> StatusChangeResponse:
    """상태 변경을 기록하고 작업 상태를 갱신합니다."""
    result: StatusChangeResponse = await task_status_change_service.create_status_change(
        db, task_id, current_user, data
    )
    await db.commit()
    return result


@router.put("/{task_id}/status-changes/{change_id}", response_model=StatusChangeResponse)
async def update_status_change(
    task_id: UUID,
    change_id: UUID,
    data: StatusChangeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> StatusChangeResponse:
    result: StatusChangeResponse = await task_status_change_service.update_status_change(
        db, task_id, change_id, current_user, data
    )
    await db.commit()
    return result


@router.delete("/{task_id}/status-changes/{change_id}", status_code=204)
async def delete_status_change(
    task_id: UUID,
    change_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> None:
    await task_status_change_service.delete_status_change(db, task_id, change_id, current_user)
    await db.commit()
