"""보드 서비스 — 프로젝트 내 보드 및 보드 멤버 비즈니스 로직.

Board Service — Business logic for boards inside projects and board
membership. Board codes are unique inside their project.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.project import Board, BoardMember, Project
from taskhub.models.user import User, UserRole
from taskhub.repositories.board_repository import board_member_repository, board_repository
from taskhub.repositories.project_repository import project_repository
from taskhub.schemas.project import (
    BoardCreate,
    BoardResponse,
    BoardUpdate,
    MemberCreate,
    MemberResponse,
)
from taskhub.services.project_service import member_to_response, project_service
from taskhub.services.user_service import user_service
from taskhub.utils.exceptions import DuplicateError, ForbiddenError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page


class BoardService:
    """보드 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, board: Board) -> BoardResponse:
        return BoardResponse(
            id=str(board.id),
            organization_id=str(board.organization_id),
            project_id=str(board.project_id),
            owner_id=str(board.owner_id),
            code=board.code,
            name=board.name,
            description=board.description,
            created_at=board.created_at,
            updated_at=board.updated_at,
        )

    async def get_entity(
        self,
        db: AsyncSession,
        board_id: UUID,
        organization_id: UUID,
    ) -> Board:
        """조직 내 보드 조회 — 없으면 404.

        Raises:
            NotFoundError: 보드를 찾을 수 없을 때 (Board not found)
        """
        board: Board | None = await board_repository.get_by_id(db, board_id, organization_id)
        if board is None:
            raise NotFoundError("Board not found")
        return board

    async def _check_can_modify(self, db: AsyncSession, board: Board, current_user: User) -> None:
        """보드 소유자, 프로젝트 소유자, pmo만 수정 가능."""
        if board.owner_id == current_user.id or current_user.role == UserRole.PMO.value:
            return
        project: Project | None = await project_repository.get_by_id(
            db, board.project_id, current_user.organization_id
        )
        if project is None or project.owner_id != current_user.id:
            raise ForbiddenError("Only the board owner, the project owner or a pmo can modify this board")

    async def _check_code_free(
        self,
        db: AsyncSession,
        organization_id: UUID,
        project_id: UUID,
        code: str,
        exclude_id: UUID | None = None,
    ) -> None:
        if await board_repository.exists(
            db, {"project_id": project_id, "code": code}, organization_id, exclude_id=exclude_id
        ):
            raise DuplicateError("Board code already exists in this project")

    async def list_boards(
        self,
        db: AsyncSession,
        project_id: UUID,
        organization_id: UUID,
        params: PageParams,
        code: str | None = None,
        name: str | None = None,
        owner_id: UUID | None = None,
    ) -> dict[str, Any]:
        """프로젝트 내 보드 목록 — Paginated boards of a project."""
        project: Project = await project_service.get_entity(db, project_id, organization_id)
        boards, total = await board_repository.search(
            db, organization_id, project.id, params, code=code, name=name, owner_id=owner_id
        )
        return build_page([self._to_response(b) for b in boards], total, params)

    async def get_board(
        self,
        db: AsyncSession,
        board_id: UUID,
        organization_id: UUID,
    ) -> BoardResponse:
        return self._to_response(await self.get_entity(db, board_id, organization_id))

    async def create_board(
        self,
        db: AsyncSession,
        project_id: UUID,
        current_user: User,
        data: BoardCreate,
    ) -> BoardResponse:
        """프로젝트에 새 보드를 생성합니다.

        Create a board inside a project. owner_id defaults to the caller.

        Raises:
            NotFoundError: 프로젝트 또는 소유자를 찾을 수 없을 때
            DuplicateError: 프로젝트 내 코드가 중복될 때
        """
        org_id: UUID = current_user.organization_id
        project: Project = await project_service.get_entity(db, project_id, org_id)
        owner_id: UUID = data.owner_id or current_user.id
        if owner_id != current_user.id:
            await user_service.get_tenant_user(db, owner_id, org_id)
        await self._check_code_free(db, org_id, project.id, data.code)

        board: Board = await board_repository.create(
            db,
            {
                "organization_id": org_id,
                "project_id": project.id,
                "owner_id": owner_id,
                "code": data.code,
                "name": data.name,
                "description": data.description,
            },
        )
        return self._to_response(board)

    async def update_board(
        self,
        db: AsyncSession,
        board_id: UUID,
        current_user: User,
        data: BoardUpdate,
    ) -> BoardResponse:
        """보드를 수정합니다 (보드 소유자, 프로젝트 소유자 또는 pmo)."""
        org_id: UUID = current_user.organization_id
        board: Board = await self.get_entity(db, board_id, org_id)
        await self._check_can_modify(db, board, current_user)

        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        for required in ("code", "name", "owner_id"):
            if update_data.get(required, "") is None:
                update_data.pop(required)

        if "owner_id" in update_data:
            await user_service.get_tenant_user(db, update_data["owner_id"], org_id)
        new_code: str | None = update_data.get("code")
        if new_code is not None and new_code != board.code:
            await self._check_code_free(db, org_id, board.project_id, new_code, exclude_id=board.id)

        board = await board_repository.update(db, board, update_data)
        return self._to_response(board)

    async def delete_board(
        self,
        db: AsyncSession,
        board_id: UUID,
        current_user: User,
    ) -> None:
        """보드와 보드 멤버십을 소프트 삭제합니다. 작업은 보드 참조를 유지."""
        board: Board = await self.get_entity(db, board_id, current_user.organization_id)
        await self._check_can_modify(db, board, current_user)
        await board_member_repository.soft_delete_where(db, BoardMember.board_id == board.id)
        await board_repository.soft_delete(db, board)

    # === 멤버 (Members) ===

    async def list_members(
        self,
        db: AsyncSession,
        board_id: UUID,
        organization_id: UUID,
        params: PageParams,
    ) -> dict[str, Any]:
        board: Board = await self.get_entity(db, board_id, organization_id)
        members, total = await board_member_repository.list_by_board(db, organization_id, board.id, params)
        return build_page([member_to_response(m, board.id) for m in members], total, params)

    async def get_member(
        self,
        db: AsyncSession,
        board_id: UUID,
        member_id: UUID,
        organization_id: UUID,
    ) -> MemberResponse:
        member: BoardMember | None = await board_member_repository.get_in_board(
            db, organization_id, board_id, member_id
        )
        if member is None:
            raise NotFoundError("Board member not found")
        return member_to_response(member, board_id)

    async def add_member(
        self,
        db: AsyncSession,
        board_id: UUID,
        current_user: User,
        data: MemberCreate,
    ) -> MemberResponse:
        """보드에 멤버를 추가합니다. 관리자 또는 본인 추가만 허용.

        Add a tenant user to a board. Managers may add anyone; any other
        user may only add themselves.

        Raises:
            ForbiddenError: 관리자가 아닌 사용자가 다른 사람을 추가할 때
            NotFoundError: 보드 또는 사용자를 찾을 수 없을 때
            DuplicateError: 이미 멤버일 때
        """
        org_id: UUID = current_user.organization_id
        if not current_user.is_manager and data.user_id != current_user.id:
            raise ForbiddenError("Only managers can add other users to a board")
        board: Board = await self.get_entity(db, board_id, org_id)
        await user_service.get_tenant_user(db, data.user_id, org_id)
        if await board_member_repository.exists(
            db, {"board_id": board.id, "user_id": data.user_id}, org_id
        ):
            raise DuplicateError("User is already a board member")

        member: BoardMember = await board_member_repository.create(
            db,
            {"organization_id": org_id, "board_id": board.id, "user_id": data.user_id},
        )
        return await self.get_member(db, board.id, member.id, org_id)

    async def remove_member(
        self,
        db: AsyncSession,
        board_id: UUID,
        member_id: UUID,
        current_user: User,
    ) -> None:
        """보드 멤버를 제거합니다. 관리자 또는 본인만 가능."""
        member: BoardMember | None = await board_member_repository.get_in_board(
            db, current_user.organization_id, board_id, member_id
        )
        if member is None:
            raise NotFoundError("Board member not found")
        if not current_user.is_manager and member.user_id != current_user.id:
            raise ForbiddenError("Only managers can remove other board members")
        await board_member_repository.soft_delete(db, member)


# 싱글턴 인스턴스: Singleton instance
board_service: BoardService = BoardService()
