"""작업(Task) 관련 Pydantic 요청/응답 스키마 정의.

Task-related Pydantic request/response schema definitions.
Covers tasks, assignments, comments and status changes.
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from taskhub.schemas.catalog import CatalogResponse
from taskhub.schemas.common import UTCDateTime


# === 작업 (Task) 스키마 ===

class TaskCreate(BaseModel):
    """작업 생성 요청 스키마. 작성자는 요청자로 설정.

    Task creation request. The creator is always the caller.

    Attributes:
        title: 제목 (Title)
        description: 설명 (Optional body)
        status_id: 상태 UUID (Optional task status in the tenant)
        priority_id: 우선순위 UUID (Optional priority in the tenant)
        project_id: 프로젝트 UUID (Optional project)
        board_id: 보드 UUID (Optional board; must belong to project_id when both given)
        due_date: 마감일 (Optional due date, YYYY-MM-DD)
    """

    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    status_id: UUID | None = None
    priority_id: UUID | None = None
    project_id: UUID | None = None
    board_id: UUID | None = None
    due_date: date | None = None


class TaskUpdate(BaseModel):
    """작업 수정 요청 스키마 (부분 업데이트). null을 보내면 연결 해제.

    Partial update; sending null for a reference clears it.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    status_id: UUID | None = None
    priority_id: UUID | None = None
    project_id: UUID | None = None
    board_id: UUID | None = None
    due_date: date | None = None


class TaskSummary(BaseModel):
    """작업 목록 항목 스키마 — Task summary used by the index endpoint."""

    id: str
    title: str
    status_id: str | None
    status_name: str | None
    priority_id: str | None
    priority_name: str | None
    creator_id: str
    project_id: str | None
    board_id: str | None
    due_date: date | None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class TaskDetail(TaskSummary):
    """작업 상세 스키마 — Full task with catalog objects and assignee ids."""

    organization_id: str
    description: str | None
    status: CatalogResponse | None
    priority: CatalogResponse | None
    assignee_ids: list[str]


# === 배정 (Assignment) 스키마 ===

class AssignmentCreate(BaseModel):
    """작업 배정 생성 요청 스키마.

    Attributes:
        assignee_id: 담당자 UUID (Tenant user to assign)
    """

    assignee_id: UUID


class AssignmentResponse(BaseModel):
    """작업 배정 응답 스키마."""

    id: str
    task_id: str
    assignee_id: str
    assignee_name: str
    assigned_at: UTCDateTime
    created_at: UTCDateTime


# === 코멘트 (Comment) 스키마 ===

class CommentCreate(BaseModel):
    """코멘트 생성 요청 스키마."""

    comment_body: str = Field(min_length=1)


class CommentUpdate(BaseModel):
    """코멘트 수정 요청 스키마."""

    comment_body: str = Field(min_length=1)


class CommentResponse(BaseModel):
    """코멘트 응답 스키마."""

    id: str
    task_id: str
    commenter_id: str
    comment_body: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


# === 상태 변경 (Status change) 스키마 ===

class StatusChangeCreate(BaseModel):
    """상태 변경 생성 요청 스키마. changed_at 생략 시 현재 시각.

    Attributes:
        new_status_id: 새 상태 UUID (Target task status)
        comment: 변경 사유 (Optional comment)
        changed_at: 변경 시각 (Defaults to now)
    """

    new_status_id: UUID
    comment: str | None = None
    changed_at: UTCDateTime | None = None


class StatusChangeUpdate(BaseModel):
    """상태 변경 수정 요청 스키마 — comment / changed_at only."""

    comment: str | None = None
    changed_at: UTCDateTime | None = None


class StatusChangeResponse(BaseModel):
    """상태 변경 응답 스키마."""

    id: str
    task_id: str
    new_status_id: str
    new_status_name: str | None
    changed_by_id: str
    changed_at: UTCDateTime
    comment: str | None
    created_at: UTCDateTime
