"""작업 배정 라우터 — /tasks/{task_id}/assignments.

Task Assignment Router. Every role may read; managers assign and unassign.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user, require_manager
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.task import AssignmentCreate, AssignmentResponse
from taskhub.services.task_assignment_service import task_assignment_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("/{task_id}/assignments", response_model=Page[AssignmentResponse])
async def list_assignments(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
) -> dict[str, Any]:
    return await task_assignment_service.list_assignments(
        db, task_id, current_user.organization_id, params
    )


@router.get("/{task_id}/assignments/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    task_id: UUID,
    assignment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> AssignmentResponse:
    return await task_assignment_service.get_assignment(
        db, task_id, assignment_id, current_user.organization_id
    )


@router.post("/{task_id}/assignments", response_model=AssignmentResponse, status_code=201)
async def create_assignment(
    task_id: UUID,
    data: AssignmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> AssignmentResponse:
    """작업에 담당자를 배정합니다. 관리자만 가능, 담당자에게 알림."""
    result: AssignmentResponse = await task_assignment_service.create_assignment(
        db, task_id, current_user, data
    )
    await db.commit()
    return result


@router.delete("/{task_id}/assignments/{assignment_id}", status_code=204)
async def delete_assignment(
    task_id: UUID,
    assignment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> None:
    """배정을 해제합니다. 관리자만 가능."""
    await task_assignment_service.delete_assignment(
        db, task_id, assignment_id, current_user.organization_id
    )
    await db.commit()
