"""Task Domain Model

creator_id 创建后不可变；只有创建者可以修改或删除任务。
其他用户能否看到任务由 visibility 决定。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import Priority, TaskStatus, Visibility


class Task(BaseModel):
    """任务"""

    task_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    due_at: datetime | None = Field(default=None, description="截止时间")
    priority: Priority = Field(description="优先级")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    assignee_id: str | None = Field(default=None, description="被指派用户 ID")
    project_id: str | None = Field(default=None, description="所属项目 ID")
    visibility: Visibility = Field(description="可见范围")
    creator_id: str = Field(description="创建者用户 ID")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
