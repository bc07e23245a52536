"""TaskStore SQLite 实现

此处仅提供数据库操作；可见性过滤和权限判断在服务层完成。
"""

from datetime import datetime

import aiosqlite

from ..models.enums import Priority, TaskStatus, Visibility
from ..models.task import Task

_COLUMNS = (
    "task_id, title, description, due_at, priority, status, assignee_id, "
    "project_id, visibility, creator_id, created_at, updated_at"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录（不自动提交）"""
        await self._conn.execute(
            f"""
            INSERT INTO tasks ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.task_id,
                task.title,
                task.description,
                task.due_at.isoformat() if task.due_at else None,
                task.priority.value,
                task.status.value,
                task.assignee_id,
                task.project_id,
                task.visibility.value,
                task.creator_id,
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(self) -> list[Task]:
        """查询全部任务，按 created_at 倒序"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def list_tasks_for_assignee(self, assignee_id: str) -> list[Task]:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE assignee_id = ? ORDER BY created_at DESC",
            (assignee_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task(self, task: Task) -> bool:
        """覆盖可变字段（creator_id / created_at 不可变）"""
        cursor = await self._conn.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, due_at = ?, priority = ?, status = ?,
                assignee_id = ?, project_id = ?, visibility = ?, updated_at = ?
            WHERE task_id = ?
            """,
            (
                task.title,
                task.description,
                task.due_at.isoformat() if task.due_at else None,
                task.priority.value,
                task.status.value,
                task.assignee_id,
                task.project_id,
                task.visibility.value,
                task.updated_at.isoformat(),
                task.task_id,
            ),
        )
        return cursor.rowcount > 0

    async def delete_task(self, task_id: str) -> bool:
        cursor = await self._conn.execute(
            "DELETE FROM tasks WHERE task_id = ?", (task_id,)
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            task_id=row[0],
            title=row[1],
            description=row[2],
            due_at=datetime.fromisoformat(row[3]) if row[3] else None,
            priority=Priority(row[4]),
            status=TaskStatus(row[5]),
            assignee_id=row[6],
            project_id=row[7],
            visibility=Visibility(row[8]),
            creator_id=row[9],
            created_at=datetime.fromisoformat(row[10]),
            updated_at=datetime.fromisoformat(row[11]),
        )
