"""TaskForge Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from .membership_store import SqliteMembershipStore
from .notification_store import SqliteNotificationStore
from .project_store import SqliteProjectStore
from .protocols import (
    MembershipStore,
    NotificationStore,
    ProjectStore,
    TaskStore,
    TeamStore,
    UserStore,
)
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .team_store import SqliteTeamStore
from .transaction import atomic, constraint_columns, create_team_with_owner
from .user_store import SqliteUserStore


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.user_store: UserStore = SqliteUserStore(conn)
        self.team_store: TeamStore = SqliteTeamStore(conn)
        self.membership_store: MembershipStore = SqliteMembershipStore(conn)
        self.project_store: ProjectStore = SqliteProjectStore(conn)
        self.task_store: TaskStore = SqliteTaskStore(conn)
        self.notification_store: NotificationStore = SqliteNotificationStore(conn)
        # 共享连接上的事务互斥：检查 + 写入 + 提交在锁内完成
        self.write_lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """持有写锁的事务上下文

        块内的读取与写入不会与其他协程的事务交错，
        回滚也只影响本事务的写入。锁不可重入，块内不要再次进入 transaction()。
        """
        async with self.write_lock:
            async with atomic(self.conn) as conn:
                yield conn


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteUserStore",
    "SqliteTeamStore",
    "SqliteMembershipStore",
    "SqliteProjectStore",
    "SqliteTaskStore",
    "SqliteNotificationStore",
    "init_db",
    "atomic",
    "create_team_with_owner",
    "constraint_columns",
]
