"""프로젝트 서비스 — 프로젝트 및 프로젝트 멤버 비즈니스 로직.

Project Service — Business logic for projects and project membership.
Managers create projects; the project owner or a pmo edits and deletes them.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.project import Board, BoardMember, Project, ProjectMember
from taskhub.models.user import User, UserRole
from taskhub.repositories.board_repository import board_member_repository, board_repository
from taskhub.repositories.project_repository import project_member_repository, project_repository
from taskhub.schemas.project import (
    MemberCreate,
    MemberResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from taskhub.services.user_service import user_service
from taskhub.utils.exceptions import DuplicateError, ForbiddenError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page


def member_to_response(member: ProjectMember | BoardMember, parent_id: UUID) -> MemberResponse:
    """멤버 모델을 응답 스키마로 변환합니다 (user eager-loaded)."""
    return MemberResponse(
        id=str(member.id),
        parent_id=str(parent_id),
        user_id=str(member.user_id),
        user_name=member.user.name,
        user_role=member.user.role,
        created_at=member.created_at,
    )


class ProjectService:
    """프로젝트 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, project: Project) -> ProjectResponse:
        return ProjectResponse(
            id=str(project.id),
            organization_id=str(project.organization_id),
            owner_id=str(project.owner_id),
            code=project.code,
            name=project.name,
            description=project.description,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )

    async def get_entity(
        self,
        db: AsyncSession,
        project_id: UUID,
        organization_id: UUID,
    ) -> Project:
        """조직 내 프로젝트 조회 — 없으면 404.

        Raises:
            NotFoundError: 프로젝트를 찾을 수 없을 때 (Project not found)
        """
        project: Project | None = await project_repository.get_by_id(db, project_id, organization_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    def _check_owner_or_pmo(self, project: Project, current_user: User) -> None:
        if project.owner_id != current_user.id and current_user.role != UserRole.PMO.value:
            raise ForbiddenError("Only the project owner or a pmo can modify this project")

    async def list_projects(
        self,
        db: AsyncSession,
        organization_id: UUID,
        params: PageParams,
        owner_id: UUID | None = None,
        code: str | None = None,
        name: str | None = None,
        search: str | None = None,
        created_at_from: datetime | None = None,
        created_at_to: datetime | None = None,
    ) -> dict[str, Any]:
        """프로젝트 목록 조회 — Paginated projects of the tenant."""
        projects, total = await project_repository.search(
            db,
            organization_id,
            params,
            owner_id=owner_id,
            code=code,
            name=name,
            search=search,
            created_at_from=created_at_from,
            created_at_to=created_at_to,
        )
        return build_page([self._to_response(p) for p in projects], total, params)

    async def get_project(
        self,
        db: AsyncSession,
        project_id: UUID,
        organization_id: UUID,
    ) -> ProjectResponse:
        return self._to_response(await self.get_entity(db, project_id, organization_id))

    async def create_project(
        self,
        db: AsyncSession,
        current_user: User,
        data: ProjectCreate,
    ) -> ProjectResponse:
        """새 프로젝트를 생성합니다.

        Create a project. owner_id defaults to the caller and must be a user
        of the same tenant.

        Raises:
            NotFoundError: 소유자를 찾을 수 없을 때 (Owner not found in tenant)
            DuplicateError: 같은 코드가 이미 존재할 때 (Code already used in tenant)
        """
        org_id: UUID = current_user.organization_id
        owner_id: UUID = data.owner_id or current_user.id
        if owner_id != current_user.id:
            await user_service.get_tenant_user(db, owner_id, org_id)
        if await project_repository.exists(db, {"code": data.code}, org_id):
            raise DuplicateError("Project code already exists")

        project: Project = await project_repository.create(
            db,
            {
                "organization_id": org_id,
                "owner_id": owner_id,
                "code": data.code,
                "name": data.name,
                "description": data.description,
            },
        )
        return self._to_response(project)

    async def update_project(
        self,
        db: AsyncSession,
        project_id: UUID,
        current_user: User,
        data: ProjectUpdate,
    ) -> ProjectResponse:
        """프로젝트를 수정합니다 (소유자 또는 pmo).

        Raises:
            NotFoundError: 프로젝트 또는 새 소유자를 찾을 수 없을 때
            ForbiddenError: 소유자/pmo가 아닐 때
            DuplicateError: 변경할 코드가 이미 존재할 때
        """
        org_id: UUID = current_user.organization_id
        project: Project = await self.get_entity(db, project_id, org_id)
        self._check_owner_or_pmo(project, current_user)

        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        for required in ("code", "name", "owner_id"):
            if update_data.get(required, "") is None:
                update_data.pop(required)

        if "owner_id" in update_data:
            await user_service.get_tenant_user(db, update_data["owner_id"], org_id)
        new_code: str | None = update_data.get("code")
        if new_code is not None and new_code != project.code:
            if await project_repository.exists(db, {"code": new_code}, org_id, exclude_id=project.id):
                raise DuplicateError("Project code already exists")

        project = await project_repository.update(db, project, update_data)
        return self._to_response(project)

    async def delete_project(
        self,
        db: AsyncSession,
        project_id: UUID,
        current_user: User,
    ) -> None:
        """프로젝트를 소프트 삭제합니다 — 보드와 멤버십도 함께 삭제.

        Soft-delete a project together with its boards, board members and
        project members. Tasks keep their project reference.
        """
        project: Project = await self.get_entity(db, project_id, current_user.organization_id)
        self._check_owner_or_pmo(project, current_user)

        board_ids: list[UUID] = await board_repository.ids_by_project(db, project.id)
        if board_ids:
            await board_member_repository.soft_delete_where(db, BoardMember.board_id.in_(board_ids))
            await board_repository.soft_delete_where(db, Board.id.in_(board_ids))
        await project_member_repository.soft_delete_where(db, ProjectMember.project_id == project.id)
        await project_repository.soft_delete(db, project)

    # === 멤버 (Members) ===

    async def list_members(
        self,
        db: AsyncSession,
        project_id: UUID,
        organization_id: UUID,
        params: PageParams,
    ) -> dict[str, Any]:
        """프로젝트 멤버 목록 — Paginated members of a project."""
        project: Project = await self.get_entity(db, project_id, organization_id)
        members, total = await project_member_repository.list_by_project(
            db, organization_id, project.id, params
        )
        return build_page([member_to_response(m, project.id) for m in members], total, params)

    async def get_member(
        self,
        db: AsyncSession,
        project_id: UUID,
        member_id: UUID,
        organization_id: UUID,
    ) -> MemberResponse:
        member: ProjectMember | None = await project_member_repository.get_in_project(
            db, organization_id, project_id, member_id
        )
        if member is None:
            raise NotFoundError("Project member not found")
        return member_to_response(member, project_id)

    async def add_member(
        self,
        db: AsyncSession,
        project_id: UUID,
        organization_id: UUID,
        data: MemberCreate,
    ) -> MemberResponse:
        """프로젝트에 멤버를 추가합니다.

        Raises:
            NotFoundError: 프로젝트 또는 사용자를 찾을 수 없을 때
            DuplicateError: 이미 멤버일 때 (Already a member)
        """
        project: Project = await self.get_entity(db, project_id, organization_id)
        await user_service.get_tenant_user(db, data.user_id, organization_id)
        if await project_member_repository.exists(
            db, {"project_id": project.id, "user_id": data.user_id}, organization_id
        ):
            raise DuplicateError("User is already a project member")

        member: ProjectMember = await project_member_repository.create(
            db,
            {"organization_id": organization_id, "project_id": project.id, "user_id": data.user_id},
        )
        return await self.get_member(db, project.id, member.id, organization_id)

    async def remove_member(
        self,
        db: AsyncSession,
        project_id: UUID,
        member_id: UUID,
        organization_id: UUID,
    ) -> None:
        """프로젝트 멤버를 소프트 삭제합니다."""
        member: ProjectMember | None = await project_member_repository.get_in_project(
            db, organization_id, project_id, member_id
        )
        if member is None:
            raise NotFoundError("Project member not found")
        await project_member_repository.soft_delete(db, member)


# 싱글턴 인스턴스: Singleton instance
project_service: ProjectService = ProjectService()
