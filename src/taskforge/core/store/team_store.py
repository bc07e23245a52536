"""TeamStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.team import Team

_COLUMNS = "team_id, name, created_at"


class SqliteTeamStore:
    """TeamStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_team(self, team: Team) -> None:
        """创建团队记录（不自动提交）"""
        await self._conn.execute(
            f"INSERT INTO teams ({_COLUMNS}) VALUES (?, ?, ?)",
            (team.team_id, team.name, team.created_at.isoformat()),
        )

    async def get_team(self, team_id: str) -> Team | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM teams WHERE team_id = ?", (team_id,)
        )
        row = await cursor.fetchone()
        return self._row_to_team(row) if row else None

    async def get_team_by_name(self, name: str) -> Team | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM teams WHERE name = ?", (name,)
        )
        row = await cursor.fetchone()
        return self._row_to_team(row) if row else None

    async def list_teams(self) -> list[Team]:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM teams ORDER BY name ASC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_team(row) for row in rows]

    async def update_team(self, team: Team) -> bool:
        cursor = await self._conn.execute(
            "UPDATE teams SET name = ? WHERE team_id = ?",
            (team.name, team.team_id),
        )
        return cursor.rowcount > 0

    async def delete_team(self, team_id: str) -> bool:
        """删除团队（成员关系级联删除，项目 team_id 置空）"""
        cursor = await self._conn.execute(
            "DELETE FROM teams WHERE team_id = ?", (team_id,)
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_team(row: aiosqlite.Row) -> Team:
        return Team(
            team_id=row[0],
            name=row[1],
            created_at=datetime.fromisoformat(row[2]),
        )
