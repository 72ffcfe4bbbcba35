"""사용자 서비스 — 사용자 조회, 생성, 수정, 삭제 비즈니스 로직.

User Service — Business logic for tenant user management.
Managers create users; users edit themselves; only pmo changes roles
and deletes accounts.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.user import User, UserRole
from taskhub.repositories.auth_repository import auth_repository
from taskhub.repositories.user_repository import user_repository
from taskhub.schemas.auth import UserResponse
from taskhub.schemas.user import UserCreate, UserUpdate
from taskhub.utils.exceptions import BadRequestError, DuplicateError, ForbiddenError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page
from taskhub.utils.password import hash_password


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스."""

    def to_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다 (비밀번호 해시 제외).

        Convert a User model to its DTO; the password hash never leaves here.
        """
        return UserResponse(
            id=str(user.id),
            organization_id=str(user.organization_id),
            email=user.email,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    async def get_tenant_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        organization_id: UUID,
    ) -> User:
        """조직 내 살아있는 사용자 조회 — 없으면 404.

        Fetch a live user of the tenant. Users of other tenants are reported
        as missing.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        user: User | None = await user_repository.get_by_id(db, user_id, organization_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self,
        db: AsyncSession,
        organization_id: UUID,
        params: PageParams,
        role: UserRole | None = None,
        search: str | None = None,
    ) -> dict[str, Any]:
        """사용자 목록을 조회합니다 — Paginated users of the tenant."""
        users, total = await user_repository.search(
            db,
            organization_id,
            params,
            role=role.value if role is not None else None,
            search=search,
        )
        return build_page([self.to_response(u) for u in users], total, params)

    async def get_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        organization_id: UUID,
    ) -> UserResponse:
        """사용자 단건 조회 — Single user DTO."""
        return self.to_response(await self.get_tenant_user(db, user_id, organization_id))

    async def create_user(
        self,
        db: AsyncSession,
        current_user: User,
        data: UserCreate,
    ) -> UserResponse:
        """새 사용자를 생성합니다.

        Create a user in the caller's tenant with an initial password.
        Only a pmo may create another pmo.

        Raises:
            ForbiddenError: pmo가 아닌데 pmo 계정을 만들 때 (Non-pmo creating a pmo)
            DuplicateError: 이메일이 이미 사용 중일 때 (Email already registered)
        """
        if data.role == UserRole.PMO and current_user.role != UserRole.PMO.value:
            raise ForbiddenError("Only a pmo can create pmo accounts")
        if await user_repository.email_taken(db, data.email):
            raise DuplicateError("Email already registered")

        user: User = await user_repository.create(
            db,
            {
                "organization_id": current_user.organization_id,
                "email": data.email,
                "name": data.name,
                "role": data.role.value,
                "password_hash": hash_password(data.password),
            },
        )
        return self.to_response(user)

    async def update_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        current_user: User,
        data: UserUpdate,
    ) -> UserResponse:
        """사용자 정보를 수정합니다.

        Update a user. Allowed for the user themselves or a pmo; role changes
        are pmo only.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
            ForbiddenError: 본인/pmo가 아니거나 pmo가 아닌데 역할 변경 시
                            (Not self/pmo, or non-pmo role change)
        """
        user: User = await self.get_tenant_user(db, user_id, current_user.organization_id)
        is_pmo: bool = current_user.role == UserRole.PMO.value
        if user.id != current_user.id and not is_pmo:
            raise ForbiddenError("Only the user or a pmo can update this account")

        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        if "role" in update_data:
            role: UserRole | None = update_data.pop("role")
            if role is not None and role.value != user.role:
                if not is_pmo:
                    raise ForbiddenError("Only a pmo can change roles")
                update_data["role"] = role.value
        if "password" in update_data:
            password: str | None = update_data.pop("password")
            if password is not None:
                update_data["password_hash"] = hash_password(password)
        if update_data.get("name", "") is None:
            update_data.pop("name")

        user = await user_repository.update(db, user, update_data)
        return self.to_response(user)

    async def delete_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        current_user: User,
    ) -> None:
        """사용자를 소프트 삭제하고 리프레시 토큰을 폐기합니다.

        Soft-delete a user and revoke all of their refresh tokens.

        Raises:
            BadRequestError: 자기 자신을 삭제하려 할 때 (Cannot delete yourself)
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        if user_id == current_user.id:
            raise BadRequestError("Cannot delete your own account")
        user: User = await self.get_tenant_user(db, user_id, current_user.organization_id)
        await auth_repository.delete_user_refresh_tokens(db, user.id)
        await user_repository.soft_delete(db, user)


# 싱글턴 인스턴스: Singleton instance
user_service: UserService = UserService()
