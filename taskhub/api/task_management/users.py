"""사용자 관리 라우터 — 테넌트 사용자 CRUD.

User Router — Tenant user management.

Permission Matrix (역할별 권한 설계):
    - 목록/상세 조회: 모든 역할 (Every role)
    - 생성: 관리자 (tpm, pm, pmo)
    - 수정: 본인 또는 pmo, 역할 변경은 pmo만 (Self or pmo; role change pmo only)
    - 삭제: pmo만, 자기 자신 제외 (pmo only, never self)
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user, require_manager, require_pmo
from taskhub.database import get_db
from taskhub.models.user import User, UserRole
from taskhub.schemas.auth import UserResponse
from taskhub.schemas.user import UserCreate, UserUpdate
from taskhub.services.user_service import user_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("", response_model=Page[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    role: Annotated[UserRole | None, Query()] = None,
    search: Annotated[str | None, Query(description="이름/이메일 부분 검색")] = None,
) -> dict[str, Any]:
    """조직 사용자 목록을 조회합니다 (정렬: name, email, created_at)."""
    return await user_service.list_users(
        db, current_user.organization_id, params, role=role, search=search
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """사용자 상세를 조회합니다."""
    return await user_service.get_user(db, user_id, current_user.organization_id)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> UserResponse:
    """새 사용자를 생성합니다. 관리자만 가능."""
    result: UserResponse = await user_service.create_user(db, current_user, data)
    await db.commit()
    return result


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """사용자 정보를 수정합니다. 본인 또는 pmo."""
    result: UserResponse = await user_service.update_user(db, user_id, current_user, data)
    await db.commit()
    return result


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_pmo)],
) -> None:
    """사용자를 삭제하고 리프레시 토큰을 폐기합니다. pmo만 가능."""
    await user_service.delete_user(db, user_id, current_user)
    await db.commit()
