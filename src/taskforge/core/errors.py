"""TaskForge 异常体系

服务层的预期失败全部归入 TaskForgeError 子类，
由 service_operation 装饰器转换为 OperationResult 返回给调用方。
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """失败分类，供展示层映射提示文案"""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid_state"
    AUTHORIZATION = "authorization"
    INFRASTRUCTURE = "infrastructure"


class TaskForgeError(Exception):
    """TaskForge 基础异常"""

    kind: ErrorKind = ErrorKind.INFRASTRUCTURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskForgeError):
    """调用方输入不满足结构性前置条件（必填字段为空、枚举缺失等）"""

    kind = ErrorKind.VALIDATION


class NotFoundError(TaskForgeError):
    """引用的实体 ID 无法解析"""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: str | None) -> None:
        """
        Args:
            entity: 实体名称，如 "user" / "team"
            entity_id: 未找到的 ID
        """
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(TaskForgeError):
    """唯一性冲突（团队重名、重复成员关系等）"""

    kind = ErrorKind.CONFLICT


class InvalidStateError(TaskForgeError):
    """实体当前状态不允许该操作"""

    kind = ErrorKind.INVALID_STATE


class AuthorizationError(TaskForgeError):
    """调用者与目标实体缺少所需关系（非创建者、非 OWNER 等）"""

    kind = ErrorKind.AUTHORIZATION


class InfrastructureError(TaskForgeError):
    """持久化层的非预期失败

    原始异常保存在 original_error 中，不向调用方暴露细节。
    """

    kind = ErrorKind.INFRASTRUCTURE

    def __init__(
        self,
        message: str = "storage operation failed",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.original_error = original_error
