"""NotificationService 测试 -- 发送、收件箱、已读与删除"""

from taskforge.core.errors import AuthorizationError, NotFoundError
from taskforge.core.models import NotificationType


class TestSend:
    """发送"""

    async def test_send_persists(self, services, make_user):
        alice = await make_user("alice")
        notification = await services.notifications.send(alice.user_id, "hello")
        assert notification is not None
        assert notification.notification_type == NotificationType.GENERAL

        inbox = (await services.notifications.list_notifications(alice.user_id)).unwrap()
        assert [n.notification_id for n in inbox] == [notification.notification_id]

    async def test_failed_delivery_returns_none(self, services):
        """接收者不存在时外键失败，发送返回 None 而不抛异常"""
        assert await services.notifications.send("ghost", "hello") is None


class TestInbox:
    """收件箱"""

    async def test_unread_and_mark_read(self, services, make_user):
        alice = await make_user("alice")
        first = await services.notifications.send(alice.user_id, "one")
        await services.notifications.send(alice.user_id, "two")
        assert (await services.notifications.count_unread(alice.user_id)).value == 2

        read = (
            await services.notifications.mark_as_read(first.notification_id, alice.user_id)
        ).unwrap()
        assert read.is_read is True
        # 重复标记视为成功
        assert (
            await services.notifications.mark_as_read(first.notification_id, alice.user_id)
        ).ok

        unread = (
            await services.notifications.list_notifications(alice.user_id, unread_only=True)
        ).unwrap()
        assert [n.message for n in unread] == ["two"]
        assert (await services.notifications.count_unread(alice.user_id)).value == 1

    async def test_only_recipient_may_modify(self, services, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        notification = await services.notifications.send(alice.user_id, "private")

        assert isinstance(
            (
                await services.notifications.mark_as_read(notification.notification_id, bob.user_id)
            ).error,
            AuthorizationError,
        )
        assert isinstance(
            (
                await services.notifications.delete_notification(
                    notification.notification_id, bob.user_id
                )
            ).error,
            AuthorizationError,
        )

    async def test_delete(self, services, make_user):
        alice = await make_user("alice")
        notification = await services.notifications.send(alice.user_id, "bye")
        assert (
            await services.notifications.delete_notification(
                notification.notification_id, alice.user_id
            )
        ).ok
        missing = await services.notifications.mark_as_read(
            notification.notification_id, alice.user_id
        )
        assert isinstance(missing.error, NotFoundError)
