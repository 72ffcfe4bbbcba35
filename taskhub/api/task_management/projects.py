"""프로젝트 라우터 — 프로젝트, 프로젝트 멤버, 프로젝트 내 보드 생성/목록.

Project Router — Projects, project members, and boards listed or created
inside a project.

Permission Matrix (역할별 권한 설계):
    - 조회: 모든 역할 (Every role)
    - 프로젝트 생성: 관리자 / 수정·삭제: 프로젝트 소유자 또는 pmo
    - 멤버 추가/삭제: 관리자
    - 보드 생성: 관리자
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user, require_manager
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.common import UTCDateTime
from taskhub.schemas.project import (
    BoardCreate,
    BoardResponse,
    MemberCreate,
    MemberResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from taskhub.services.board_service import board_service
from taskhub.services.project_service import project_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("", response_model=Page[ProjectResponse])
async def list_projects(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    owner_id: Annotated[UUID | None, Query()] = None,
    code: Annotated[str | None, Query()] = None,
    name: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query(description="코드/이름/설명 부분 검색")] = None,
    created_at_from: Annotated[UTCDateTime | None, Query()] = None,
    created_at_to: Annotated[UTCDateTime | None, Query()] = None,
) -> dict[str, Any]:
    """프로젝트 목록을 조회합니다."""
    return await project_service.list_projects(
        db,
        current_user.organization_id,
        params,
        owner_id=owner_id,
        code=code,
        name=name,
        search=search,
        created_at_from=created_at_from,
        created_at_to=created_at_to,
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProjectResponse:
    return await project_service.get_project(db, project_id, current_user.organization_id)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> ProjectResponse:
    """프로젝트를 생성합니다. 관리자만 가능, 소유자 기본값은 요청자."""
    result: ProjectResponse = await project_service.create_project(db, current_user, data)
    await db.commit()
    return result


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProjectResponse:
    """프로젝트를 수정합니다. 소유자 또는 pmo."""
    result: ProjectResponse = await project_service.update_project(db, project_id, current_user, data)
    await db.commit()
    return result


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> None:
    """프로젝트를 삭제합니다 (보드/멤버 포함). 소유자 또는 pmo."""
    await project_service.delete_project(db, project_id, current_user)
    await db.commit()


# === 프로젝트 멤버 (Project members) ===

@router.get("/{project_id}/members", response_model=Page[MemberResponse])
async def list_project_members(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
) -> dict[str, Any]:
    return await project_service.list_members(db, project_id, current_user.organization_id, params)


@router.post("/{project_id}/members", response_model=MemberResponse, status_code=201)
async def add_project_member(
    project_id: UUID,
    data: MemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> MemberResponse:
    """프로젝트에 멤버를 추가합니다. 관리자만 가능."""
    result: MemberResponse = await project_service.add_member(
        db, project_id, current_user.organization_id, data
    )
    await db.commit()
    return result


@router.get("/{project_id}/members/{member_id}", response_model=MemberResponse)
async def get_project_member(
    project_id: UUID,
    member_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MemberResponse:
    return await project_service.get_member(db, project_id, member_id, current_user.organization_id)


@router.delete("/{project_id}/members/{member_id}", status_code=204)
async def remove_project_member(
    project_id: UUID,
    member_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> None:
    """프로젝트 멤버를 제거합니다. 관리자만 가능."""
    await project_service.remove_member(db, project_id, member_id, current_user.organization_id)
    await db.commit()


# === 프로젝트 내 보드 (Boards inside a project) ===

@router.get("/{project_id}/boards", response_model=Page[BoardResponse])
async def list_boards(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    code: Annotated[str | None, Query()] = None,
    name: Annotated[str | None, Query()] = None,
    owner_id: Annotated[UUID | None, Query()] = None,
) -> dict[str, Any]:
    """프로젝트의 보드 목록을 조회합니다 (정렬: name, code, created_at)."""
    return await board_service.list_boards(
        db, project_id, current_user.organization_id, params, code=code, name=name, owner_id=owner_id
    )


@router.post("/{project_id}/boards", response_model=BoardResponse, status_code=201)
async def create_board(
    project_id: UUID,
    data: BoardCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> BoardResponse:
    """프로젝트에 보드를 생성합니다. 관리자만 가능."""
    result: BoardResponse = await board_service.create_board(db, project_id, current_user, data)
    await db.commit()
    return result
