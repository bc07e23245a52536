"""MembershipStore SQLite 实现

(user_id, team_id) 为复合主键：同一对用户/团队最多一条记录，
并发重复插入由主键约束拦截。
"""

from datetime import datetime

import aiosqlite

from ..models.enums import InvitationStatus, Role
from ..models.team import UserTeamMembership

_COLUMNS = "user_id, team_id, role, invitation_status, created_at, updated_at"


class SqliteMembershipStore:
    """MembershipStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_membership(self, membership: UserTeamMembership) -> None:
        """创建成员关系（不自动提交）

        Raises:
            aiosqlite.IntegrityError: 该用户/团队组合已存在记录
        """
        await self._conn.execute(
            f"INSERT INTO team_memberships ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (
                membership.user_id,
                membership.team_id,
                membership.role.value,
                membership.invitation_status.value,
                membership.created_at.isoformat(),
                membership.updated_at.isoformat(),
            ),
        )

    async def get_membership(self, user_id: str, team_id: str) -> UserTeamMembership | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM team_memberships WHERE user_id = ? AND team_id = ?",
            (user_id, team_id),
        )
        row = await cursor.fetchone()
        return self._row_to_membership(row) if row else None

    async def list_memberships_for_user(
        self,
        user_id: str,
        status: InvitationStatus | None = None,
    ) -> list[UserTeamMembership]:
        """查询用户的成员关系，按创建时间正序"""
        if status:
            cursor = await self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM team_memberships
                WHERE user_id = ? AND invitation_status = ?
                ORDER BY created_at ASC
                """,
                (user_id, status.value),
            )
        else:
            cursor = await self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM team_memberships
                WHERE user_id = ?
                ORDER BY created_at ASC
                """,
                (user_id,),
            )
        rows = await cursor.fetchall()
        return [self._row_to_membership(row) for row in rows]

    async def list_memberships_for_team(
        self,
        team_id: str,
        status: InvitationStatus | None = None,
    ) -> list[UserTeamMembership]:
        """查询团队的成员关系，按创建时间正序"""
        if status:
            cursor = await self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM team_memberships
                WHERE team_id = ? AND invitation_status = ?
                ORDER BY created_at ASC
                """,
                (team_id, status.value),
            )
        else:
            cursor = await self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM team_memberships
                WHERE team_id = ?
                ORDER BY created_at ASC
                """,
                (team_id,),
            )
        rows = await cursor.fetchall()
        return [self._row_to_membership(row) for row in rows]

    async def update_membership(self, membership: UserTeamMembership) -> bool:
        cursor = await self._conn.execute(
            """
            UPDATE team_memberships
            SET role = ?, invitation_status = ?, updated_at = ?
            WHERE user_id = ? AND team_id = ?
            """,
            (
                membership.role.value,
                membership.invitation_status.value,
                membership.updated_at.isoformat(),
                membership.user_id,
                membership.team_id,
            ),
        )
        return cursor.rowcount > 0

    async def delete_membership(self, user_id: str, team_id: str) -> bool:
        cursor = await self._conn.execute(
            "DELETE FROM team_memberships WHERE user_id = ? AND team_id = ?",
            (user_id, team_id),
        )
        return cursor.rowcount > 0

    async def count_owners(self, team_id: str) -> int:
        cursor = await self._conn.execute(
            """
            SELECT COUNT(*) FROM team_memberships
            WHERE team_id = ? AND role = ? AND invitation_status = ?
            """,
            (team_id, Role.OWNER.value, InvitationStatus.ACCEPTED.value),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def list_team_ids_without_owner(self) -> list[str]:
        cursor = await self._conn.execute(
            """
            SELECT t.team_id FROM teams t
            WHERE NOT EXISTS (
                SELECT 1 FROM team_memberships m
                WHERE m.team_id = t.team_id
                  AND m.role = ?
                  AND m.invitation_status = ?
            )
            ORDER BY t.name ASC
            """,
            (Role.OWNER.value, InvitationStatus.ACCEPTED.value),
        )
        rows = await cursor.fetchall()
        return [row[0] for row in rows]

    @staticmethod
    def _row_to_membership(row: aiosqlite.Row) -> UserTeamMembership:
        """将数据库行转换为 UserTeamMembership 模型"""
        return UserTeamMembership(
            user_id=row[0],
            team_id=row[1],
            role=Role(row[2]),
            invitation_status=InvitationStatus(row[3]),
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
        )
