"""ProjectStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.project import Project

_COLUMNS = "project_id, name, team_id, created_at"


class SqliteProjectStore:
    """ProjectStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_project(self, project: Project) -> None:
        await self._conn.execute(
            f"INSERT INTO projects ({_COLUMNS}) VALUES (?, ?, ?, ?)",
            (
                project.project_id,
                project.name,
                project.team_id,
                project.created_at.isoformat(),
            ),
        )

    async def get_project(self, project_id: str) -> Project | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM projects WHERE project_id = ?", (project_id,)
        )
        row = await cursor.fetchone()
        return self._row_to_project(row) if row else None

    async def list_projects(self) -> list[Project]:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM projects ORDER BY created_at ASC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_project(row) for row in rows]

    async def list_projects_for_team(self, team_id: str) -> list[Project]:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM projects WHERE team_id = ? ORDER BY created_at ASC",
            (team_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_project(row) for row in rows]

    async def update_project(self, project: Project) -> bool:
        cursor = await self._conn.execute(
            "UPDATE projects SET name = ?, team_id = ? WHERE project_id = ?",
            (project.name, project.team_id, project.project_id),
        )
        return cursor.rowcount > 0

    async def delete_project(self, project_id: str) -> bool:
        cursor = await self._conn.execute(
            "DELETE FROM projects WHERE project_id = ?", (project_id,)
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_project(row: aiosqlite.Row) -> Project:
        return Project(
            project_id=row[0],
            name=row[1],
            team_id=row[2],
            created_at=datetime.fromisoformat(row[3]),
        )
