"""작업 라우터 — 작업 CRUD.

Task Router — Task index with filters, detail, create, update, delete.

Permission Matrix (역할별 권한 설계):
    - 조회/생성: 모든 역할 (Every role; the caller becomes the creator)
    - 수정: 작성자, 담당자 또는 관리자 (Creator, assignee or manager)
    - 삭제: 작성자 또는 관리자 (Creator or manager)
"""

from datetime import date
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.task import TaskCreate, TaskDetail, TaskSummary, TaskUpdate
from taskhub.services.task_service import task_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("", response_model=Page[TaskSummary])
async def list_tasks(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    status_id: Annotated[UUID | None, Query()] = None,
    priority_id: Annotated[UUID | None, Query()] = None,
    creator_id: Annotated[UUID | None, Query()] = None,
    project_id: Annotated[UUID | None, Query()] = None,
    board_id: Annotated[UUID | None, Query()] = None,
    assignee_id: Annotated[UUID | None, Query()] = None,
    search: Annotated[str | None, Query(description="제목 부분 검색")] = None,
    due_date_from: Annotated[date | None, Query()] = None,
    due_date_to: Annotated[date | None, Query()] = None,
) -> dict[str, Any]:
    """작업 목록을 조회합니다 (정렬: title, due_date, created_at, updated_at)."""
    return await task_service.list_tasks(
        db,
        current_user.organization_id,
        params,
        status_id=status_id,
        priority_id=priority_id,
        creator_id=creator_id,
        project_id=project_id,
        board_id=board_id,
        assignee_id=assignee_id,
        search=search,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
    )


@router.get("/{task_id}", response_model=TaskDetail)
async def get_task(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> TaskDetail:
    """작업 상세를 조회합니다 (상태, 우선순위, 담당자 포함)."""
    return await task_service.get_task(db, task_id, current_user.organization_id)


@router.post("", response_model=TaskDetail, status_code=201)
async def create_task(
    data: TaskCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> TaskDetail:
    """작업을 생성합니다."""
    result: TaskDetail = await task_service.create_task(db, current_user, data)
    await db.commit()
    return result


@router.put("/{task_id}", response_model=TaskDetail)
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> TaskDetail:
    """작업을 수정합니다."""
    result: TaskDetail = await task_service.update_task(db, task_id, current_user, data)
    await db.commit()
    return result


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> None:
    """작업을 삭제합니다 (배정/코멘트/상태 이력 포함)."""
    await task_service.delete_task(db, task_id, current_user)
    await db.commit()
