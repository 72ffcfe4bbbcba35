"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    organization: 조직 (Organization / tenant)
    user: 사용자 및 역할 (User and UserRole)
    token: 리프레시 토큰, 인증 감사 로그 (Refresh tokens, auth audit log)
    catalog: 작업 상태, 우선순위 (Task statuses and priorities)
    project: 프로젝트, 보드, 멤버 (Projects, boards and their members)
    task: 작업, 배정, 코멘트, 상태 변경 (Tasks, assignments, comments, status changes)
    notification: 알림, 알림 수신 설정 (User notifications and notification preferences)
"""

from taskhub.models.organization import Organization
from taskhub.models.user import User, UserRole, MANAGER_ROLES
from taskhub.models.token import RefreshToken, AuthAuditLog
from taskhub.models.catalog import TaskStatus, TaskPriority
from taskhub.models.project import Project, ProjectMember, Board, BoardMember
from taskhub.models.task import Task, TaskAssignment, TaskComment, TaskStatusChange
from taskhub.models.notification import Notification, NotificationPreference, NotificationType

__all__ = [
    "Organization",
    "User", "UserRole", "MANAGER_ROLES",
    "RefreshToken", "AuthAuditLog",
    "TaskStatus", "TaskPriority",
    "Project", "ProjectMember", "Board", "BoardMember",
    "Task", "TaskAssignment", "TaskComment", "TaskStatusChange",
    "Notification", "NotificationPreference", "NotificationType",
]
