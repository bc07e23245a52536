"""服务装配 -- 启动时构建一次完整的服务对象图"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import structlog
from taskforge.core.config import get_db_path
from taskforge.core.store import StoreGroup, create_store_group

from .notification_service import NotificationService
from .project_service import ProjectService
from .task_service import TaskService
from .team_service import TeamService
from .user_service import UserService

log = structlog.get_logger()


@dataclass(frozen=True)
class ServiceContainer:
    """共享同一个 StoreGroup 的服务集合"""

    stores: StoreGroup
    notifications: NotificationService
    users: UserService
    teams: TeamService
    projects: ProjectService
    tasks: TaskService


def build_services(store_group: StoreGroup) -> ServiceContainer:
    """按依赖顺序装配服务：通知 -> 团队 -> 任务"""
    notifications = NotificationService(store_group)
    teams = TeamService(store_group, notifications)
    return ServiceContainer(
        stores=store_group,
        notifications=notifications,
        users=UserService(store_group),
        teams=teams,
        projects=ProjectService(store_group),
        tasks=TaskService(store_group, teams, notifications),
    )


@asynccontextmanager
async def open_services(db_path: str | None = None) -> AsyncIterator[ServiceContainer]:
    """打开数据库并构建服务，退出时关闭连接

    Args:
        db_path: SQLite 文件路径，None 时读取 TASKFORGE_DB_PATH
    """
    path = db_path or get_db_path()
    store_group = await create_store_group(path)
    log.info("services_opened", db_path=path)
    try:
        yield build_services(store_group)
    finally:
        await store_group.conn.close()
        log.info("services_closed", db_path=path)
