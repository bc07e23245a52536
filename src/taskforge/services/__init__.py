"""TaskForge 业务服务层

所有公开操作返回 OperationResult，业务错误不以异常形式抛给调用方。
"""

from .container import ServiceContainer, build_services, open_services
from .notification_service import NotificationService
from .project_service import ProjectService
from .task_service import TaskService
from .team_service import TeamService
from .user_service import UserService
from .visibility import filter_visible_tasks, is_task_visible

__all__ = [
    "ServiceContainer",
    "build_services",
    "open_services",
    "NotificationService",
    "ProjectService",
    "TaskService",
    "TeamService",
    "UserService",
    "filter_visible_tasks",
    "is_task_visible",
]
