"""SQLite 数据库初始化

PRAGMA 配置 + 六张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

from ..config import SQLITE_BUSY_TIMEOUT_MS

# users 表 DDL
_USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    user_id        TEXT PRIMARY KEY,
    username       TEXT NOT NULL UNIQUE,
    email          TEXT NOT NULL UNIQUE,
    password_hash  TEXT NOT NULL,
    created_at     TEXT NOT NULL
);
"""

# teams 表 DDL
_TEAMS_DDL = """
CREATE TABLE IF NOT EXISTS teams (
    team_id     TEXT PRIMARY KEY,
    name        TEXT NOT NULL UNIQUE,
    created_at  TEXT NOT NULL
);
"""

# team_memberships 表 DDL -- (user_id, team_id) 复合主键保证成员关系唯一
_MEMBERSHIPS_DDL = """
CREATE TABLE IF NOT EXISTS team_memberships (
    user_id            TEXT NOT NULL,
    team_id            TEXT NOT NULL,
    role               TEXT NOT NULL DEFAULT 'MEMBER',
    invitation_status  TEXT NOT NULL DEFAULT 'PENDING',
    created_at         TEXT NOT NULL,
    updated_at         TEXT NOT NULL,

    PRIMARY KEY (user_id, team_id),
    FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
    FOREIGN KEY (team_id) REFERENCES teams(team_id) ON DELETE CASCADE
);
"""

_MEMBERSHIPS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_memberships_team_id ON team_memberships(team_id);",
]

# projects 表 DDL -- 团队删除后项目保留，team_id 置空
_PROJECTS_DDL = """
CREATE TABLE IF NOT EXISTS projects (
    project_id  TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    team_id     TEXT,
    created_at  TEXT NOT NULL,

    FOREIGN KEY (team_id) REFERENCES teams(team_id) ON DELETE SET NULL
);
"""

_PROJECTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_projects_team_id ON projects(team_id);",
]

# tasks 表 DDL -- 创建者删除时级联删除其任务
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    task_id      TEXT PRIMARY KEY,
    title        TEXT NOT NULL,
    description  TEXT,
    due_at       TEXT,
    priority     TEXT NOT NULL,
    status       TEXT NOT NULL DEFAULT 'PENDING',
    assignee_id  TEXT,
    project_id   TEXT,
    visibility   TEXT NOT NULL,
    creator_id   TEXT NOT NULL,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL,

    FOREIGN KEY (assignee_id) REFERENCES users(user_id) ON DELETE SET NULL,
    FOREIGN KEY (project_id) REFERENCES projects(project_id) ON DELETE SET NULL,
    FOREIGN KEY (creator_id) REFERENCES users(user_id) ON DELETE CASCADE
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_assignee_id ON tasks(assignee_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_creator_id ON tasks(creator_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]

# notifications 表 DDL
_NOTIFICATIONS_DDL = """
CREATE TABLE IF NOT EXISTS notifications (
    notification_id    TEXT PRIMARY KEY,
    recipient_id       TEXT NOT NULL,
    message            TEXT NOT NULL,
    sent_at            TEXT NOT NULL,
    is_read            INTEGER NOT NULL DEFAULT 0,
    related_entity_id  TEXT,
    notification_type  TEXT NOT NULL DEFAULT 'GENERAL',

    FOREIGN KEY (recipient_id) REFERENCES users(user_id) ON DELETE CASCADE
);
"""

_NOTIFICATIONS_INDEXES = [
    (
        "CREATE INDEX IF NOT EXISTS idx_notifications_recipient "
        "ON notifications(recipient_id, sent_at DESC);"
    ),
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA（foreign_keys 为连接级设置，每个连接都需执行）
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS};")

    # 创建表（按外键依赖顺序）
    for ddl in (
        _USERS_DDL,
        _TEAMS_DDL,
        _MEMBERSHIPS_DDL,
        _PROJECTS_DDL,
        _TASKS_DDL,
        _NOTIFICATIONS_DDL,
    ):
        await conn.execute(ddl)

    # 创建索引
    for idx_sql in (
        _MEMBERSHIPS_INDEXES + _PROJECTS_INDEXES + _TASKS_INDEXES + _NOTIFICATIONS_INDEXES
    ):
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_foreign_keys(conn: aiosqlite.Connection) -> bool:
    """验证外键约束是否已在当前连接上启用

    Returns:
        True 如果 foreign_keys 已开启
    """
    cursor = await conn.execute("PRAGMA foreign_keys;")
    row = await cursor.fetchone()
    return row is not None and row[0] == 1
