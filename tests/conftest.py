"""全局 pytest 配置 -- 临时 SQLite 数据库 + 服务容器 fixture"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import aiosqlite
import pytest_asyncio
from taskforge.core.models import User
from taskforge.core.store import StoreGroup, create_store_group
from taskforge.services import ServiceContainer, build_services


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from taskforge.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "raw.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """提供共享临时数据库连接的 StoreGroup"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.conn.close()


@pytest_asyncio.fixture
async def services(store_group: StoreGroup) -> ServiceContainer:
    """提供装配好的服务容器"""
    return build_services(store_group)


@pytest_asyncio.fixture
async def make_user(services: ServiceContainer) -> Callable[[str], Awaitable[User]]:
    """注册用户的工厂：make_user("alice") -> User"""

    async def _make(username: str, password: str = "s3cret-pass") -> User:
        result = await services.users.register_user(
            username, f"{username}@example.com", password
        )
        return result.unwrap()

    return _make
