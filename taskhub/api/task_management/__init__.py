"""업무 관리 API 라우터 패키지 — 모든 업무 관리 엔드포인트 통합.

Task management API Router package — Aggregates every tenant-scoped
endpoint into a single router mounted at /api/v1/task-management.

Included routers:
    - organizations: 현재 조직 (Current organization)
    - users: 사용자 관리 (User management)
    - task-statuses / priorities: 작업 카탈로그 (Task catalogs)
    - projects: 프로젝트, 프로젝트 멤버, 프로젝트 내 보드 (Projects, members, boards)
    - boards: 보드 단건 및 보드 멤버 (Boards and board members)
    - tasks: 작업, 배정, 코멘트, 상태 변경 (Tasks and their sub-resources)
    - notifications: 알림 (Notifications)
    - notification-preferences: 알림 수신 설정 (Per-type notification preferences)
"""

from fastapi import APIRouter

from taskhub.api.task_management.organizations import router as organizations_router
from taskhub.api.task_management.users import router as users_router
from taskhub.api.task_management.catalogs import priorities_router, task_statuses_router
from taskhub.api.task_management.projects import router as projects_router
from taskhub.api.task_management.boards import router as boards_router
from taskhub.api.task_management.tasks import router as tasks_router
from taskhub.api.task_management.task_assignments import router as task_assignments_router
from taskhub.api.task_management.task_comments import router as task_comments_router
from taskhub.api.task_management.task_status_changes import router as task_status_changes_router
from taskhub.api.task_management.notifications import router as notifications_router
from taskhub.api.task_management.notification_preferences import router as notification_preferences_router

task_management_router: APIRouter = APIRouter()

task_management_router.include_router(organizations_router, prefix="/organization", tags=["Organization"])
task_management_router.include_router(users_router, prefix="/users", tags=["Users"])
task_management_router.include_router(task_statuses_router, prefix="/task-statuses", tags=["Task Statuses"])
task_management_router.include_router(priorities_router, prefix="/priorities", tags=["Task Priorities"])
task_management_router.include_router(projects_router, prefix="/projects", tags=["Projects"])
task_management_router.include_router(boards_router, prefix="/boards", tags=["Boards"])
task_management_router.include_router(tasks_router, prefix="/tasks", tags=["Tasks"])
task_management_router.include_router(task_assignments_router, prefix="/tasks", tags=["Task Assignments"])
task_management_router.include_router(task_comments_router, prefix="/tasks", tags=["Task Comments"])
task_management_router.include_router(task_status_changes_router, prefix="/tasks", tags=["Task Status Changes"])
task_management_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
task_management_router.include_router(
    notification_preferences_router, prefix="/notification-preferences", tags=["Notification Preferences"]
)
