"""Notification Domain Model

由任务指派、团队邀请等操作附带产生；创建后仅允许修改已读标记。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import NotificationType


class Notification(BaseModel):
    """站内通知"""

    notification_id: str = Field(description="唯一标识，ULID 格式")
    recipient_id: str = Field(description="接收者用户 ID")
    message: str = Field(description="通知正文")
    sent_at: datetime = Field(description="发送时间")
    is_read: bool = Field(default=False, description="是否已读")
    related_entity_id: str | None = Field(
        default=None,
        description="关联实体 ID（团队邀请为 team_id，任务指派为 task_id）",
    )
    notification_type: NotificationType = Field(
        default=NotificationType.GENERAL,
        description="通知类型",
    )
