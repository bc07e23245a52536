"""CLI 入口模块 -- python -m taskforge.core <command>

支持的命令：
  init-db       创建数据库文件并初始化表结构
  check-owners  列出没有 ACCEPTED OWNER 的团队
"""

import asyncio
import sys

from .config import get_db_path
from .logging_config import setup_logging

_USAGE = """用法: python -m taskforge.core <command>
命令:
  init-db       创建数据库文件并初始化表结构
  check-owners  列出没有 ACCEPTED OWNER 的团队"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print(_USAGE)
        sys.exit(1)

    command = sys.argv[1]
    setup_logging()

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "check-owners":
        orphaned = asyncio.run(check_owners())
        if orphaned:
            sys.exit(2)
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db, check-owners")
        sys.exit(1)


async def init_database() -> None:
    """初始化数据库（可重复执行）"""
    from .store import create_store_group
    from .store.sqlite_init import verify_foreign_keys

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        fk_enabled = await verify_foreign_keys(store_group.conn)
        print(f"初始化完成，外键约束: {'开启' if fk_enabled else '关闭'}")
    finally:
        await store_group.conn.close()


async def check_owners() -> list[str]:
    """检查团队 OWNER 完整性

    Returns:
        缺少 OWNER 的团队 ID 列表
    """
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        orphaned = await store_group.membership_store.list_team_ids_without_owner()
    finally:
        await store_group.conn.close()

    if not orphaned:
        print("所有团队均有 OWNER")
    else:
        print(f"{len(orphaned)} 个团队缺少 OWNER:")
        for team_id in orphaned:
            print(f"  {team_id}")
    return orphaned


if __name__ == "__main__":
    main()
