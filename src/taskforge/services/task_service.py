"""TaskService -- 任务创建/更新/删除与可见性查询

规则：
1. 新任务状态固定为 PENDING，creator_id 创建后不可变
2. 只有创建者可以更新或删除任务（被指派人也不行）
3. 指派给他人时向被指派人发送 TASK_ASSIGNMENT 通知
4. 所有读取路径都按查看者应用可见性过滤
"""

from datetime import UTC, datetime

import structlog
from taskforge.core.errors import AuthorizationError, NotFoundError, ValidationError
from taskforge.core.models import (
    INITIAL_TASK_STATUS,
    NotificationType,
    Priority,
    Task,
    TaskStatus,
    User,
    Visibility,
)
from taskforge.core.result import service_operation
from taskforge.core.store import StoreGroup
from ulid import ULID

from .notification_service import NotificationService
from .team_service import TeamService
from .validation import require_enum
from .visibility import filter_visible_tasks, is_task_visible

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        team_service: TeamService,
        notification_service: NotificationService,
    ) -> None:
        self._stores = store_group
        self._teams = team_service
        self._notifications = notification_service

    @service_operation
    async def create_task(
        self,
        *,
        title: str,
        creator_id: str,
        priority: Priority,
        visibility: Visibility,
        description: str | None = None,
        due_at: datetime | None = None,
        assignee_id: str | None = None,
        project_id: str | None = None,
    ) -> Task:
        """创建任务

        Returns:
            新建的 Task（status 恒为 PENDING）
        """
        priority, visibility = self._validate_fields(title, priority, visibility)
        creator = await self._stores.user_store.get_user(creator_id)
        if creator is None:
            raise NotFoundError("user", creator_id)
        assignee = await self._resolve_assignee(assignee_id)
        await self._resolve_project(project_id)

        now = datetime.now(UTC)
        task = Task(
            task_id=str(ULID()),
            title=title.strip(),
            description=description,
            due_at=due_at,
            priority=priority,
            status=INITIAL_TASK_STATUS,
            assignee_id=assignee_id,
            project_id=project_id,
            visibility=visibility,
            creator_id=creator_id,
            created_at=now,
            updated_at=now,
        )
        async with self._stores.transaction():
            await self._stores.task_store.create_task(task)

        log.info(
            "task_created",
            task_id=task.task_id,
            creator_id=creator_id,
            assignee_id=assignee_id,
            visibility=visibility.value,
        )

        # 自己指派给自己不发通知
        if assignee is not None and assignee.user_id != creator_id:
            await self._notifications.send(
                assignee.user_id,
                f"You have been assigned to a new task: '{task.title}' by {creator.username}.",
                related_entity_id=task.task_id,
                notification_type=NotificationType.TASK_ASSIGNMENT,
            )
        return task

    @service_operation
    async def update_task(
        self,
        task_id: str,
        caller_id: str,
        *,
        title: str,
        priority: Priority,
        status: TaskStatus,
        visibility: Visibility,
        description: str | None = None,
        due_at: datetime | None = None,
        assignee_id: str | None = None,
        project_id: str | None = None,
    ) -> Task:
        """覆盖任务的全部可变字段，仅创建者可调用

        assignee_id / project_id 为 None 表示取消指派 / 移出项目。
        """
        task = await self._get_task_or_raise(task_id)
        if task.creator_id != caller_id:
            raise AuthorizationError("only the creator may update a task")
        priority, visibility = self._validate_fields(title, priority, visibility)
        status = require_enum(TaskStatus, status, "status")
        assignee = await self._resolve_assignee(assignee_id)
        await self._resolve_project(project_id)

        updated = task.model_copy(
            update={
                "title": title.strip(),
                "description": description,
                "due_at": due_at,
                "priority": priority,
                "status": status,
                "assignee_id": assignee_id,
                "project_id": project_id,
                "visibility": visibility,
                "updated_at": datetime.now(UTC),
            }
        )
        async with self._stores.transaction():
            await self._stores.task_store.update_task(updated)

        log.info(
            "task_updated",
            task_id=task_id,
            caller_id=caller_id,
            status=status.value,
            assignee_id=assignee_id,
        )

        # 被指派人变更（含 未指派 -> 指派）才通知；取消指派或指派给同一人不通知
        if assignee is not None and assignee.user_id != task.assignee_id:
            caller = await self._stores.user_store.get_user(caller_id)
            caller_name = caller.username if caller is not None else caller_id
            await self._notifications.send(
                assignee.user_id,
                f"You have been assigned to task: '{updated.title}' by {caller_name}.",
                related_entity_id=task_id,
                notification_type=NotificationType.TASK_ASSIGNMENT,
            )
        return updated

    @service_operation
    async def delete_task(self, task_id: str, caller_id: str) -> None:
        """删除任务，仅创建者可调用"""
        task = await self._get_task_or_raise(task_id)
        if task.creator_id != caller_id:
            raise AuthorizationError("only the creator may delete a task")
        async with self._stores.transaction():
            await self._stores.task_store.delete_task(task_id)
        log.info("task_deleted", task_id=task_id, caller_id=caller_id)

    @service_operation
    async def get_task(self, task_id: str, viewer_id: str) -> Task:
        """查询单个任务；对查看者不可见的任务按不存在处理"""
        task = await self._get_task_or_raise(task_id)
        teammate_ids = await self._teammate_ids_for(task, viewer_id)
        if not is_task_visible(task, viewer_id, teammate_ids):
            raise NotFoundError("task", task_id)
        return task

    @service_operation
    async def get_tasks_by_assigned_user(self, assignee_id: str, viewer_id: str) -> list[Task]:
        """查询指派给某用户的任务，按查看者过滤"""
        tasks = await self._stores.task_store.list_tasks_for_assignee(assignee_id)
        teammate_ids = (await self._teams.list_teammate_ids(viewer_id)).unwrap()
        return filter_visible_tasks(tasks, viewer_id, teammate_ids)

    @service_operation
    async def get_all_visible_tasks(self, viewer_id: str) -> list[Task]:
        """查询对查看者可见的全部任务"""
        tasks = await self._stores.task_store.list_tasks()
        teammate_ids = (await self._teams.list_teammate_ids(viewer_id)).unwrap()
        return filter_visible_tasks(tasks, viewer_id, teammate_ids)

    @staticmethod
    def _validate_fields(
        title: str,
        priority: Priority | str | None,
        visibility: Visibility | str | None,
    ) -> tuple[Priority, Visibility]:
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("task title must not be empty")
        return (
            require_enum(Priority, priority, "priority"),
            require_enum(Visibility, visibility, "visibility"),
        )

    async def _get_task_or_raise(self, task_id: str) -> Task:
        task = await self._stores.task_store.get_task(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        return task

    async def _resolve_assignee(self, assignee_id: str | None) -> User | None:
        if assignee_id is None:
            return None
        assignee = await self._stores.user_store.get_user(assignee_id)
        if assignee is None:
            raise NotFoundError("user", assignee_id)
        return assignee

    async def _resolve_project(self, project_id: str | None) -> None:
        if project_id is None:
            return
        if await self._stores.project_store.get_project(project_id) is None:
            raise NotFoundError("project", project_id)

    async def _teammate_ids_for(self, task: Task, viewer_id: str) -> set[str]:
        # 只有 RESTRICTED 需要团队关系
        if task.visibility != Visibility.RESTRICTED:
            return set()
        return (await self._teams.list_teammate_ids(viewer_id)).unwrap()
