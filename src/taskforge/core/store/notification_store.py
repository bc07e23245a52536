"""NotificationStore SQLite 实现"""

from datetime import datetime

import aiosqlite

from ..models.enums import NotificationType
from ..models.notification import Notification

_COLUMNS = (
    "notification_id, recipient_id, message, sent_at, is_read, "
    "related_entity_id, notification_type"
)


class SqliteNotificationStore:
    """NotificationStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_notification(self, notification: Notification) -> None:
        await self._conn.execute(
            f"INSERT INTO notifications ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                notification.notification_id,
                notification.recipient_id,
                notification.message,
                notification.sent_at.isoformat(),
                int(notification.is_read),
                notification.related_entity_id,
                notification.notification_type.value,
            ),
        )

    async def get_notification(self, notification_id: str) -> Notification | None:
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM notifications WHERE notification_id = ?",
            (notification_id,),
        )
        row = await cursor.fetchone()
        return self._row_to_notification(row) if row else None

    async def list_notifications_for_recipient(
        self,
        recipient_id: str,
        unread_only: bool = False,
    ) -> list[Notification]:
        """查询用户的通知，按 sent_at 倒序"""
        sql = f"SELECT {_COLUMNS} FROM notifications WHERE recipient_id = ?"
        if unread_only:
            sql += " AND is_read = 0"
        sql += " ORDER BY sent_at DESC, notification_id DESC"
        cursor = await self._conn.execute(sql, (recipient_id,))
        rows = await cursor.fetchall()
        return [self._row_to_notification(row) for row in rows]

    async def mark_read(self, notification_id: str) -> bool:
        cursor = await self._conn.execute(
            "UPDATE notifications SET is_read = 1 WHERE notification_id = ?",
            (notification_id,),
        )
        return cursor.rowcount > 0

    async def delete_notification(self, notification_id: str) -> bool:
        cursor = await self._conn.execute(
            "DELETE FROM notifications WHERE notification_id = ?",
            (notification_id,),
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_notification(row: aiosqlite.Row) -> Notification:
        return Notification(
            notification_id=row[0],
            recipient_id=row[1],
            message=row[2],
            sent_at=datetime.fromisoformat(row[3]),
            is_read=bool(row[4]),
            related_entity_id=row[5],
            notification_type=NotificationType(row[6]),
        )
