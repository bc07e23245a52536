"""服务操作结果封装

每个公开的服务操作返回 OperationResult：成功时携带 value，
失败时携带一个 TaskForgeError。预期失败不会以异常形式逃逸。
"""

import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, ParamSpec, TypeVar

import aiosqlite
import pydantic
import structlog

from .errors import InfrastructureError, TaskForgeError, ValidationError

log = structlog.get_logger()

T = TypeVar("T")
P = ParamSpec("P")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """成功值或类型化失败的二选一结果"""

    value: T | None = None
    error: TaskForgeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TaskForgeError) -> "OperationResult[Any]":
        return cls(error=error)

    def unwrap(self) -> T:
        """取出成功值；失败时重新抛出其中的错误

        Raises:
            TaskForgeError: 结果为失败时
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def service_operation(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[OperationResult[T]]]:
    """将抛出 TaskForgeError / aiosqlite.Error 的协程转换为返回 OperationResult

    构造模型时的 pydantic 校验失败同样视为调用方输入错误，返回 ValidationError。
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> OperationResult[T]:
        try:
            value = await func(*args, **kwargs)
        except TaskForgeError as e:
            return _rejected(func.__qualname__, e)
        except pydantic.ValidationError as e:
            return _rejected(func.__qualname__, ValidationError(_summarize_validation_error(e)))
        except aiosqlite.Error as e:
            log.error(
                "operation_storage_failure",
                operation=func.__qualname__,
                error_type=type(e).__name__,
            )
            return OperationResult.failure(InfrastructureError(original_error=e))
        return OperationResult.success(value)

    return wrapper


def _rejected(operation: str, error: TaskForgeError) -> OperationResult[Any]:
    log.info(
        "operation_rejected",
        operation=operation,
        error_kind=error.kind.value,
        reason=error.message,
    )
    return OperationResult.failure(error)


def _summarize_validation_error(error: pydantic.ValidationError) -> str:
    """把 pydantic 错误列表压缩成一行 "field: msg; ..." 文本"""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or error.title
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
