"""보드 라우터 — 보드 단건 조회/수정/삭제 및 보드 멤버.

Board Router — Single-board endpoints and board membership. Boards are
listed and created under /projects/{project_id}/boards.

Permission Matrix:
    - 조회: 모든 역할 (Every role)
    - 수정/삭제: 보드 소유자, 프로젝트 소유자 또는 pmo
    - 멤버 추가: 관리자, 또는 본인 추가 (Managers, or any user adding themselves)
    - 멤버 제거: 관리자, 또는 본인 (Managers, or the member themselves)
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.project import BoardResponse, BoardUpdate, MemberCreate, MemberResponse
from taskhub.services.board_service import board_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("/{board_id}", response_model=BoardResponse)
async def get_board(
    board_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> BoardResponse:
    return await board_service.get_board(db, board_id, current_user.organization_id)


@router.put("/{board_id}", response_model=BoardResponse)
async def update_board(
    board_id: UUID,
    data: BoardUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> BoardResponse:
    """보드를 수정합니다."""
    result: BoardResponse = await board_service.update_board(db, board_id, current_user, data)
    await db.commit()
    return result


@router.delete("/{board_id}", status_code=204)
async def delete_board(
    board_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> None:
    """보드를 삭제합니다."""
    await board_service.delete_board(db, board_id, current_user)
    await db.commit()


@router.get("/{board_id}/members", response_model=Page[MemberResponse])
async def list_board_members(
    board_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
) -> dict[str, Any]:
    return await board_service.list_members(db, board_id, current_user.organization_id, params)


@router.post("/{board_id}/members", response_model=MemberResponse, status_code=201)
async def add_board_member(
    board_id: UUID,
    data: MemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MemberResponse:
    """보드에 멤버를 추가합니다."""
    result: MemberResponse = await board_service.add_member(db, board_id, current_user, data)
    await db.commit()
    return result


@router.get("/{board_id}/members/{member_id}", response_model=MemberResponse)
async def get_board_member(
    board_id: UUID,
    member_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MemberResponse:
    return await board_service.get_member(db, board_id, member_id, current_user.organization_id)


@router.delete("/{board_id}/members/{member_id}", status_code=204)
async def remove_board_member(
    board_id: UUID,
    member_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> None:
    """보드 멤버를 제거합니다."""
    await board_service.remove_member(db, board_id, member_id, current_user)
    await db.commit()
