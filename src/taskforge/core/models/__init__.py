"""TaskForge Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    INITIAL_TASK_STATUS,
    InvitationStatus,
    NotificationType,
    Priority,
    Role,
    TaskStatus,
    Visibility,
)
from .notification import Notification
from .project import Project
from .task import Task
from .team import Team, UserTeamMembership
from .user import User

__all__ = [
    # 枚举
    "Role",
    "InvitationStatus",
    "Priority",
    "TaskStatus",
    "Visibility",
    "NotificationType",
    "INITIAL_TASK_STATUS",
    # 实体
    "User",
    "Team",
    "UserTeamMembership",
    "Project",
    "Task",
    "Notification",
]
