"""작업 코멘트 서비스 — 코멘트 CRUD 및 알림 비즈니스 로직.

Task Comment Service — Any role may comment; only the author may edit or
delete a comment. New comments notify the task creator and assignees,
never the author.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.notification import NotificationType
from taskhub.models.task import Task, TaskComment
from taskhub.models.user import User
from taskhub.repositories.task_activity_repository import task_comment_repository
from taskhub.repositories.task_repository import task_repository
from taskhub.schemas.task import CommentCreate, CommentResponse, CommentUpdate
from taskhub.services.notification_service import notification_service
from taskhub.services.task_service import task_service
from taskhub.utils.exceptions import ForbiddenError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page


class TaskCommentService:
    """작업 코멘트 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, comment: TaskComment) -> CommentResponse:
        return CommentResponse(
            id=str(comment.id),
            task_id=str(comment.task_id),
            commenter_id=str(comment.commenter_id),
            comment_body=comment.comment_body,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )

    async def _get(
        self,
        db: AsyncSession,
        organization_id: UUID,
        task_id: UUID,
        comment_id: UUID,
    ) -> TaskComment:
        comment: TaskComment | None = await task_comment_repository.get_in_task(
            db, organization_id, task_id, comment_id
        )
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def _get_own(
        self,
        db: AsyncSession,
        task_id: UUID,
        comment_id: UUID,
        current_user: User,
    ) -> TaskComment:
        comment: TaskComment = await self._get(db, current_user.organization_id, task_id, comment_id)
        if comment.commenter_id != current_user.id:
            raise ForbiddenError("Only the author can modify this comment")
        return comment

    async def list_comments(
        self,
        db: AsyncSession,
        task_id: UUID,
        organization_id: UUID,
        params: PageParams,
        commenter_id: UUID | None = None,
        search: str | None = None,
        created_at_from: datetime | None = None,
        created_at_to: datetime | None = None,
    ) -> dict[str, Any]:
        """작업 코멘트 목록 — Paginated comments of a task."""
        task: Task = await task_service.get_entity(db, task_id, organization_id)
        items, total = await task_comment_repository.search(
            db,
            organization_id,
            task.id,
            params,
            commenter_id=commenter_id,
            search=search,
            created_at_from=created_at_from,
            created_at_to=created_at_to,
        )
        return build_page([self._to_response(c) for c in items], total, params)

    async def get_comment(
        self,
        db: AsyncSession,
        task_id: UUID,
        comment_id: UUID,
        organization_id: UUID,
    ) -> CommentResponse:
        return self._to_response(await self._get(db, organization_id, task_id, comment_id))

    async def create_comment(
        self,
        db: AsyncSession,
        task_id: UUID,
        current_user: User,
        data: CommentCreate,
    ) -> CommentResponse:
        """코멘트를 작성하고 작성자/담당자에게 알립니다.

        Add a comment and notify the task creator and assignees except the author.
        """
        org_id: UUID = current_user.organization_id
        task: Task = await task_service.get_entity(db, task_id, org_id)
        comment: TaskComment = await task_comment_repository.create(
            db,
            {
                "organization_id": org_id,
                "task_id": task.id,
                "commenter_id": current_user.id,
                "comment_body": data.comment_body,
            },
        )

        recipients: list[UUID] = [task.creator_id, *await task_repository.assignee_ids(db, task.id)]
        await notification_service.notify(
            db,
            org_id,
            [user_id for user_id in recipients if user_id != current_user.id],
            type=NotificationType.TASK_COMMENTED.value,
            message=f"{current_user.name} commented on task: {task.title}",
            reference_type="task",
            reference_id=task.id,
        )
        return self._to_response(comment)

    async def update_comment(
        self,
        db: AsyncSession,
        task_id: UUID,
        comment_id: UUID,
        current_user: User,
        data: CommentUpdate,
    ) -> CommentResponse:
        """코멘트를 수정합니다 (작성자만)."""
        comment: TaskComment = await self._get_own(db, task_id, comment_id, current_user)
        comment = await task_comment_repository.update(db, comment, {"comment_body": data.comment_body})
        return self._to_response(comment)

    async def delete_comment(
        self,
        db: AsyncSession,
        task_id: UUID,
        comment_id: UUID,
        current_user: User,
    ) -> None:
        """코멘트를 소프트 삭제합니다 (작성자만)."""
        comment: TaskComment = await self._get_own(db, task_id, comment_id, current_user)
        await task_comment_repository.soft_delete(db, comment)


# 싱글턴 인스턴스: Singleton instance
task_comment_service: TaskCommentService = TaskCommentService()
