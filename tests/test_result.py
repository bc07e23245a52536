"""OperationResult 与 service_operation 装饰器测试"""

from datetime import UTC, datetime

import aiosqlite
import pytest
from taskforge.core.errors import (
    ConflictError,
    ErrorKind,
    InfrastructureError,
    NotFoundError,
    TaskForgeError,
    ValidationError,
)
from taskforge.core.models import Task, Visibility
from taskforge.core.result import OperationResult, service_operation


class _Sample:
    @service_operation
    async def succeed(self, value: int) -> int:
        return value * 2

    @service_operation
    async def conflict(self) -> int:
        raise ConflictError("duplicate")

    @service_operation
    async def storage_failure(self) -> int:
        raise aiosqlite.OperationalError("database is locked")

    @service_operation
    async def bug(self) -> int:
        raise RuntimeError("boom")

    @service_operation
    async def bad_model(self) -> Task:
        return Task(
            task_id="k1",
            title="t",
            priority="URGENT",
            visibility=Visibility.PUBLIC,
            creator_id="u1",
            created_at=datetime.now(UTC),
            updated_at=datetime.now(UTC),
        )


class TestOperationResult:
    """结果封装测试"""

    def test_success(self):
        result = OperationResult.success(42)
        assert result.ok
        assert result.value == 42
        assert result.unwrap() == 42

    def test_failure_unwrap_raises(self):
        error = NotFoundError("team", "t1")
        result = OperationResult.failure(error)
        assert not result.ok
        with pytest.raises(NotFoundError) as exc_info:
            result.unwrap()
        assert exc_info.value is error

    def test_not_found_message(self):
        error = NotFoundError("user", "u42")
        assert error.message == "user not found: u42"
        assert error.kind == ErrorKind.NOT_FOUND


class TestServiceOperation:
    """装饰器的异常转换"""

    async def test_wraps_return_value(self):
        result = await _Sample().succeed(21)
        assert result.ok
        assert result.value == 42

    async def test_domain_error_becomes_failure(self):
        result = await _Sample().conflict()
        assert not result.ok
        assert isinstance(result.error, ConflictError)
        assert result.error.kind == ErrorKind.CONFLICT

    async def test_storage_error_becomes_infrastructure(self):
        result = await _Sample().storage_failure()
        assert isinstance(result.error, InfrastructureError)
        assert isinstance(result.error.original_error, aiosqlite.OperationalError)
        assert isinstance(result.error, TaskForgeError)

    async def test_model_validation_becomes_validation_error(self):
        result = await _Sample().bad_model()
        assert isinstance(result.error, ValidationError)
        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.message.startswith("priority:")

    async def test_programming_error_propagates(self):
        """非预期异常不被吞掉"""
        with pytest.raises(RuntimeError):
            await _Sample().bug()

    def test_preserves_metadata(self):
        assert _Sample.succeed.__name__ == "succeed"
