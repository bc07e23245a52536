"""事务封装

在同一 SQLite 事务内原子提交多步写入，失败时整体回滚。
团队创建与创建者 OWNER 成员关系必须同时落盘或同时不落盘。

atomic 本身不加锁；服务层通过 StoreGroup.transaction() 在写锁内使用它，
共享连接上同一时刻只有一个事务。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import aiosqlite

from ..models.team import Team, UserTeamMembership
from .protocols import MembershipStore, TeamStore


@asynccontextmanager
async def atomic(conn: aiosqlite.Connection) -> AsyncGenerator[aiosqlite.Connection, None]:
    """事务上下文：正常退出时提交，抛出异常时回滚并重新抛出

    Args:
        conn: 数据库连接（同一连接上的所有写入共享该事务）
    """
    try:
        yield conn
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise


async def create_team_with_owner(
    conn: aiosqlite.Connection,
    team_store: TeamStore,
    membership_store: MembershipStore,
    team: Team,
    owner_membership: UserTeamMembership,
) -> None:
    """在同一事务内原子写入团队和创建者的 OWNER 成员关系

    Args:
        conn: 数据库连接
        team_store: TeamStore 实例
        membership_store: MembershipStore 实例
        team: 新团队
        owner_membership: 创建者的 ACCEPTED / OWNER 成员关系

    Raises:
        Exception: 任一写入失败时自动回滚后重新抛出
    """
    try:
        await team_store.create_team(team)
        await membership_store.create_membership(owner_membership)

        # 原子提交
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise


def constraint_columns(error: aiosqlite.IntegrityError) -> set[str]:
    """解析约束冲突涉及的 "表.列" 集合

    依赖 SQLite 的错误文本格式，例如
    "UNIQUE constraint failed: team_memberships.user_id, team_memberships.team_id"；
    外键等不带列名的冲突返回空集合。
    """
    _, sep, columns = str(error).partition("constraint failed:")
    if not sep:
        return set()
    return {column.strip() for column in columns.split(",") if column.strip()}
