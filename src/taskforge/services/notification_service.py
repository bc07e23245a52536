"""NotificationService -- 通知发送与收件箱管理

send() 是核心服务使用的通知出口：fire-and-forget，
写入失败只记录告警，不影响触发它的业务操作。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskforge.core.errors import AuthorizationError, NotFoundError
from taskforge.core.models import Notification, NotificationType
from taskforge.core.result import service_operation
from taskforge.core.store import StoreGroup
from ulid import ULID

log = structlog.get_logger()


class NotificationService:
    """通知业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def send(
        self,
        recipient_id: str,
        message: str,
        related_entity_id: str | None = None,
        notification_type: NotificationType = NotificationType.GENERAL,
    ) -> Notification | None:
        """发送通知

        Returns:
            写入成功的 Notification；写入失败时返回 None
        """
        notification = Notification(
            notification_id=str(ULID()),
            recipient_id=recipient_id,
            message=message,
            sent_at=datetime.now(UTC),
            related_entity_id=related_entity_id,
            notification_type=notification_type,
        )
        try:
            async with self._stores.transaction():
                await self._stores.notification_store.create_notification(notification)
        except aiosqlite.Error as e:
            log.warning(
                "notification_delivery_failed",
                recipient_id=recipient_id,
                notification_type=notification_type.value,
                error_type=type(e).__name__,
            )
            return None

        log.info(
            "notification_sent",
            notification_id=notification.notification_id,
            recipient_id=recipient_id,
            notification_type=notification_type.value,
        )
        return notification

    @service_operation
    async def list_notifications(
        self,
        recipient_id: str,
        *,
        unread_only: bool = False,
    ) -> list[Notification]:
        """查询用户收件箱，最新的在前"""
        return await self._stores.notification_store.list_notifications_for_recipient(
            recipient_id, unread_only=unread_only
        )

    @service_operation
    async def count_unread(self, recipient_id: str) -> int:
        unread = await self._stores.notification_store.list_notifications_for_recipient(
            recipient_id, unread_only=True
        )
        return len(unread)

    @service_operation
    async def mark_as_read(self, notification_id: str, recipient_id: str) -> Notification:
        """标记已读（重复标记视为成功）"""
        notification = await self._get_owned(notification_id, recipient_id)
        if notification.is_read:
            return notification
        async with self._stores.transaction():
            await self._stores.notification_store.mark_read(notification_id)
        return notification.model_copy(update={"is_read": True})

    @service_operation
    async def delete_notification(self, notification_id: str, recipient_id: str) -> None:
        """删除通知，仅接收者本人可操作"""
        await self._get_owned(notification_id, recipient_id)
        async with self._stores.transaction():
            await self._stores.notification_store.delete_notification(notification_id)
        log.info(
            "notification_deleted",
            notification_id=notification_id,
            recipient_id=recipient_id,
        )

    async def _get_owned(self, notification_id: str, recipient_id: str) -> Notification:
        notification = await self._stores.notification_store.get_notification(notification_id)
        if notification is None:
            raise NotFoundError("notification", notification_id)
        if notification.recipient_id != recipient_id:
            raise AuthorizationError("only the recipient may modify a notification")
        return notification
