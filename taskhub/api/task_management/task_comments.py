"""작업 코멘트 라우터 — /tasks/{task_id}/comments.

Task Comment Router. Every role may read and comment; only the author
may edit or delete a comment.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.common import UTCDateTime
from taskhub.schemas.task import CommentCreate, CommentResponse, CommentUpdate
from taskhub.services.task_comment_service import task_comment_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("/{task_id}/comments", response_model=Page[CommentResponse])
async def list_comments(
    task_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    commenter_id: Annotated[UUID | None, Query()] = None,
    search: Annotated[str | None, Query(description="본문 부분 검색")] = None,
    created_at_from: Annotated[UTCDateTime | None, Query()] = None,
    created_at_to: Annotated[UTCDateTime | None, Query()] = None,
) -> dict[str, Any]:
    return await task_comment_service.list_comments(
        db,
        task_id,
        current_user.organization_id,
        params,
        commenter_id=commenter_id,
        search=search,
        created_at_from=created_at_from,
        created_at_to=created_at_to,
    )


@router.get("/{task_id}/comments/{comment_id}", response_model=CommentResponse)
async def get_comment(
    task_id: UUID,
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> CommentResponse:
    return await task_comment_service.get_comment(db, task_id, comment_id, current_user.organization_id)


@router.post("/{task_id}/comments", response_model=CommentResponse, status_code=201)
async def create_comment(
    task_id: UUID,
    data: CommentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> CommentResponse:
    """코멘트를 작성합니다. 작업 작성자와 담당자에게 알림."""
    result: CommentResponse = await task_comment_service.create_comment(db, task_id, current_user, data)
    await db.commit()
    return result


@router.put("/{task_id}/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    task_id: UUID,
    comment_id: UUID,
    data: CommentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> CommentResponse:
    """코멘트를 수정합니다. 작성자만 가능."""
    result: CommentResponse = await task_comment_service.update_comment(
        db, task_id, comment_id, current_user, data
    )
    await db.commit()
    return result


@router.delete("/{task_id}/comments/{comment_id}", status_code=204)
async def delete_comment(
    task_id: UUID,
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> None:
    """코멘트를 삭제합니다. 작성자만 가능."""
    await task_comment_service.delete_comment(db, task_id, comment_id, current_user)
    await db.commit()
