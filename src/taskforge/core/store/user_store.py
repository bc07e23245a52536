"""UserStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.user import User

_COLUMNS = "user_id, username, email, password_hash, created_at"


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_user(self, user: User) -> None:
        """创建用户记录

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            f"INSERT INTO users ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            (
                user.user_id,
                user.username,
                user.email,
                user.password_hash,
                user.created_at.isoformat(),
            ),
        )

    async def get_user(self, user_id: str) -> User | None:
        return await self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE user_id = ?", (user_id,)
        )

    async def get_user_by_username(self, username: str) -> User | None:
        return await self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE username = ?", (username,)
        )

    async def get_user_by_email(self, email: str) -> User | None:
        return await self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE email = ?", (email,)
        )

    async def list_users(self) -> list[User]:
        """查询全部用户，按用户名排序"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM users ORDER BY username ASC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_user(row) for row in rows]

    async def update_user(self, user: User) -> bool:
        cursor = await self._conn.execute(
            """
            UPDATE users
            SET username = ?, email = ?, password_hash = ?
            WHERE user_id = ?
            """,
            (user.username, user.email, user.password_hash, user.user_id),
        )
        return cursor.rowcount > 0

    async def delete_user(self, user_id: str) -> bool:
        """删除用户（外键级联删除其创建的任务、成员关系和通知）"""
        cursor = await self._conn.execute(
            "DELETE FROM users WHERE user_id = ?", (user_id,)
        )
        return cursor.rowcount > 0

    async def _fetch_one(self, sql: str, params: tuple) -> User | None:
        cursor = await self._conn.execute(sql, params)
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        """将数据库行转换为 User 模型"""
        return User(
            user_id=row[0],
            username=row[1],
            email=row[2],
            password_hash=row[3],
            created_at=datetime.fromisoformat(row[4]),
        )
