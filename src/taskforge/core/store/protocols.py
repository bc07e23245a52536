"""Store Protocol 接口定义

定义各实体存储的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
所有写方法都不自动提交事务，由调用方管理事务边界。
"""

from typing import Protocol

from ..models.enums import InvitationStatus
from ..models.notification import Notification
from ..models.project import Project
from ..models.task import Task
from ..models.team import Team, UserTeamMembership
from ..models.user import User


class UserStore(Protocol):
    """User 存储接口"""

    async def create_user(self, user: User) -> None:
        """创建用户记录"""
        ...

    async def get_user(self, user_id: str) -> User | None:
        """根据 user_id 查询用户"""
        ...

    async def get_user_by_username(self, username: str) -> User | None:
        ...

    async def get_user_by_email(self, email: str) -> User | None:
        ...

    async def list_users(self) -> list[User]:
        ...

    async def update_user(self, user: User) -> bool:
        """更新 username / email / password_hash，返回是否命中记录"""
        ...

    async def delete_user(self, user_id: str) -> bool:
        ...


class TeamStore(Protocol):
    """Team 存储接口"""

    async def create_team(self, team: Team) -> None:
        ...

    async def get_team(self, team_id: str) -> Team | None:
        ...

    async def get_team_by_name(self, name: str) -> Team | None:
        ...

    async def list_teams(self) -> list[Team]:
        ...

    async def update_team(self, team: Team) -> bool:
        ...

    async def delete_team(self, team_id: str) -> bool:
        ...


class MembershipStore(Protocol):
    """UserTeamMembership 存储接口

    (user_id, team_id) 唯一；重复插入触发 IntegrityError。
    """

    async def create_membership(self, membership: UserTeamMembership) -> None:
        ...

    async def get_membership(self, user_id: str, team_id: str) -> UserTeamMembership | None:
        ...

    async def list_memberships_for_user(
        self,
        user_id: str,
        status: InvitationStatus | None = None,
    ) -> list[UserTeamMembership]:
        """查询用户的成员关系，支持按邀请状态筛选"""
        ...

    async def list_memberships_for_team(
        self,
        team_id: str,
        status: InvitationStatus | None = None,
    ) -> list[UserTeamMembership]:
        """查询团队的成员关系，支持按邀请状态筛选"""
        ...

    async def update_membership(self, membership: UserTeamMembership) -> bool:
        """更新 role / invitation_status"""
        ...

    async def delete_membership(self, user_id: str, team_id: str) -> bool:
        ...

    async def count_owners(self, team_id: str) -> int:
        """统计团队中已接受邀请的 OWNER 数量"""
        ...

    async def list_team_ids_without_owner(self) -> list[str]:
        """查询缺少 ACCEPTED OWNER 的团队（用于一致性巡检）"""
        ...


class ProjectStore(Protocol):
    """Project 存储接口"""

    async def create_project(self, project: Project) -> None:
        ...

    async def get_project(self, project_id: str) -> Project | None:
        ...

    async def list_projects(self) -> list[Project]:
        ...

    async def list_projects_for_team(self, team_id: str) -> list[Project]:
        ...

    async def update_project(self, project: Project) -> bool:
        ...

    async def delete_project(self, project_id: str) -> bool:
        ...


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, task: Task) -> None:
        ...

    async def get_task(self, task_id: str) -> Task | None:
        ...

    async def list_tasks(self) -> list[Task]:
        """查询全部任务，按 created_at 倒序"""
        ...

    async def list_tasks_for_assignee(self, assignee_id: str) -> list[Task]:
        ...

    async def update_task(self, task: Task) -> bool:
        """覆盖除 creator_id / created_at 外的全部可变字段"""
        ...

    async def delete_task(self, task_id: str) -> bool:
        ...


class NotificationStore(Protocol):
    """Notification 存储接口"""

    async def create_notification(self, notification: Notification) -> None:
        ...

    async def get_notification(self, notification_id: str) -> Notification | None:
        ...

    async def list_notifications_for_recipient(
        self,
        recipient_id: str,
        unread_only: bool = False,
    ) -> list[Notification]:
        """查询用户的通知，按 sent_at 倒序"""
        ...

    async def mark_read(self, notification_id: str) -> bool:
        ...

    async def delete_notification(self, notification_id: str) -> bool:
        ...
