"""枚举定义

包含团队成员关系（Role / InvitationStatus）、任务属性
（Priority / TaskStatus / Visibility）以及通知类型。
"""

from enum import StrEnum


class Role(StrEnum):
    """团队内角色"""

    MEMBER = "MEMBER"
    OWNER = "OWNER"


class InvitationStatus(StrEnum):
    """邀请状态

    REJECTED 仅作为取值保留：拒绝邀请时直接删除成员关系记录，
    不会持久化 REJECTED。
    """

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Priority(StrEnum):
    """任务优先级"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskStatus(StrEnum):
    """任务状态 -- 无流转约束，创建者可设置为任意值"""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


class Visibility(StrEnum):
    """任务可见范围"""

    PUBLIC = "PUBLIC"
    RESTRICTED = "RESTRICTED"
    PRIVATE = "PRIVATE"


class NotificationType(StrEnum):
    """通知类型"""

    GENERAL = "GENERAL"
    TASK_ASSIGNMENT = "TASK_ASSIGNMENT"
    TEAM_INVITATION = "TEAM_INVITATION"


# 新建任务的初始状态（忽略调用方传入值）
INITIAL_TASK_STATUS = TaskStatus.PENDING
