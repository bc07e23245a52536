"""ProjectService -- 项目维护，项目可选归属于某个团队"""

from datetime import UTC, datetime

import structlog
from taskforge.core.errors import NotFoundError, ValidationError
from taskforge.core.models import Project
from taskforge.core.result import service_operation
from taskforge.core.store import StoreGroup
from ulid import ULID

log = structlog.get_logger()


class ProjectService:
    """项目业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    @service_operation
    async def create_project(self, name: str, team_id: str | None = None) -> Project:
        """创建项目

        Args:
            name: 项目名称，不能为空
            team_id: 所属团队，None 表示不归属任何团队
        """
        name = self._require_name(name)
        await self._resolve_team(team_id)

        project = Project(
            project_id=str(ULID()),
            name=name,
            team_id=team_id,
            created_at=datetime.now(UTC),
        )
        async with self._stores.transaction():
            await self._stores.project_store.create_project(project)
        log.info("project_created", project_id=project.project_id, team_id=team_id)
        return project

    @service_operation
    async def update_project(
        self,
        project_id: str,
        name: str,
        team_id: str | None = None,
    ) -> Project:
        """修改项目名称与团队归属"""
        project = await self._get_project_or_raise(project_id)
        name = self._require_name(name)
        await self._resolve_team(team_id)

        updated = project.model_copy(update={"name": name, "team_id": team_id})
        async with self._stores.transaction():
            await self._stores.project_store.update_project(updated)
        log.info("project_updated", project_id=project_id, team_id=team_id)
        return updated

    @service_operation
    async def delete_project(self, project_id: str) -> None:
        """删除项目；其下任务保留但移出项目"""
        await self._get_project_or_raise(project_id)
        async with self._stores.transaction():
            await self._stores.project_store.delete_project(project_id)
        log.info("project_deleted", project_id=project_id)

    @service_operation
    async def get_project(self, project_id: str) -> Project:
        return await self._get_project_or_raise(project_id)

    @service_operation
    async def list_projects(self) -> list[Project]:
        return await self._stores.project_store.list_projects()

    @service_operation
    async def get_projects_by_team(self, team_id: str) -> list[Project]:
        return await self._stores.project_store.list_projects_for_team(team_id)

    @staticmethod
    def _require_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("project name must not be empty")
        return name

    async def _get_project_or_raise(self, project_id: str) -> Project:
        project = await self._stores.project_store.get_project(project_id)
        if project is None:
            raise NotFoundError("project", project_id)
        return project

    async def _resolve_team(self, team_id: str | None) -> None:
        if team_id is None:
            return
        if await self._stores.team_store.get_team(team_id) is None:
            raise NotFoundError("team", team_id)
