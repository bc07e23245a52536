"""UserService -- 注册、登录与用户资料维护

密码以 PBKDF2 哈希存储；username 与 email 必须全局唯一。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskforge.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from taskforge.core.models import User
from taskforge.core.result import service_operation
from taskforge.core.security import check_password, hash_password
from taskforge.core.store import StoreGroup
from ulid import ULID

log = structlog.get_logger()

# 登录失败统一提示，不区分“用户不存在”和“密码错误”
_INVALID_CREDENTIALS = "invalid username or password"


class UserService:
    """用户业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    @service_operation
    async def register_user(self, username: str, email: str, password: str) -> User:
        """注册新用户

        Raises (以失败结果返回):
            ValidationError: 任一字段为空
            ConflictError: username 或 email 已被占用
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username or not email or not password or not password.strip():
            raise ValidationError("username, email and password are required")
        await self._ensure_unique(username, email)

        user = User(
            user_id=str(ULID()),
            username=username,
            email=email,
            password_hash=hash_password(password),
            created_at=datetime.now(UTC),
        )
        try:
            async with self._stores.transaction():
                await self._stores.user_store.create_user(user)
        except aiosqlite.IntegrityError as e:
            raise ConflictError("username or email already registered") from e

        log.info("user_registered", user_id=user.user_id)
        return user

    @service_operation
    async def authenticate(self, username: str, password: str) -> User:
        """校验用户名和密码，成功时返回用户"""
        if not username or not username.strip() or not password or not password.strip():
            raise ValidationError("username and password are required")

        user = await self._stores.user_store.get_user_by_username(username.strip())
        if user is None:
            raise AuthorizationError(_INVALID_CREDENTIALS)
        try:
            matched = check_password(password, user.password_hash)
        except ValueError:
            log.warning("stored_password_hash_invalid", user_id=user.user_id)
            raise AuthorizationError(_INVALID_CREDENTIALS) from None
        if not matched:
            raise AuthorizationError(_INVALID_CREDENTIALS)
        return user

    @service_operation
    async def update_user(self, user_id: str, username: str, email: str) -> User:
        """修改用户名和邮箱"""
        user = await self._get_user_or_raise(user_id)
        username = (username or "").strip()
        email = (email or "").strip()
        if not username or not email:
            raise ValidationError("username and email are required")
        await self._ensure_unique(username, email, exclude_user_id=user_id)

        updated = user.model_copy(update={"username": username, "email": email})
        try:
            async with self._stores.transaction():
                await self._stores.user_store.update_user(updated)
        except aiosqlite.IntegrityError as e:
            raise ConflictError("username or email already registered") from e
        log.info("user_updated", user_id=user_id)
        return updated

    @service_operation
    async def delete_user(self, user_id: str) -> None:
        """删除用户；其创建的任务、成员关系和通知级联删除"""
        await self._get_user_or_raise(user_id)
        async with self._stores.transaction():
            await self._stores.user_store.delete_user(user_id)
        log.info("user_deleted", user_id=user_id)

    @service_operation
    async def get_user(self, user_id: str) -> User:
        return await self._get_user_or_raise(user_id)

    @service_operation
    async def list_users(self) -> list[User]:
        return await self._stores.user_store.list_users()

    async def _get_user_or_raise(self, user_id: str) -> User:
        user = await self._stores.user_store.get_user(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    async def _ensure_unique(
        self,
        username: str,
        email: str,
        exclude_user_id: str | None = None,
    ) -> None:
        by_name = await self._stores.user_store.get_user_by_username(username)
        if by_name is not None and by_name.user_id != exclude_user_id:
            raise ConflictError(f"username already taken: {username}")
        by_email = await self._stores.user_store.get_user_by_email(email)
        if by_email is not None and by_email.user_id != exclude_user_id:
            raise ConflictError(f"email already registered: {email}")
