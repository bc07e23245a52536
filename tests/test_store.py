"""SQLite Store 单元测试

测试内容：
1. 初始化：PRAGMA 与幂等建表
2. 各 Store 的 CRUD
3. 外键级联（删除用户/团队/项目）
4. OWNER 统计查询
"""

from datetime import UTC, datetime

import aiosqlite
import pytest
from taskforge.core.models import (
    InvitationStatus,
    Notification,
    Priority,
    Project,
    Role,
    Task,
    Team,
    User,
    UserTeamMembership,
    Visibility,
)
from taskforge.core.store import StoreGroup
from taskforge.core.store.sqlite_init import init_db, verify_foreign_keys


def _user(user_id: str) -> User:
    return User(
        user_id=user_id,
        username=f"name-{user_id}",
        email=f"{user_id}@example.com",
        password_hash="salt:hash",
        created_at=datetime.now(UTC),
    )


def _team(team_id: str, name: str | None = None) -> Team:
    return Team(team_id=team_id, name=name or f"team-{team_id}", created_at=datetime.now(UTC))


def _membership(
    user_id: str,
    team_id: str,
    role: Role = Role.MEMBER,
    status: InvitationStatus = InvitationStatus.ACCEPTED,
) -> UserTeamMembership:
    now = datetime.now(UTC)
    return UserTeamMembership(
        user_id=user_id,
        team_id=team_id,
        role=role,
        invitation_status=status,
        created_at=now,
        updated_at=now,
    )


def _task(task_id: str, creator_id: str, **overrides) -> Task:
    now = datetime.now(UTC)
    fields = {
        "task_id": task_id,
        "title": f"task {task_id}",
        "priority": Priority.MEDIUM,
        "visibility": Visibility.PUBLIC,
        "creator_id": creator_id,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return Task(**fields)


class TestInitDb:
    """数据库初始化"""

    async def test_foreign_keys_enabled(self, db_conn: aiosqlite.Connection):
        assert await verify_foreign_keys(db_conn) is True

    async def test_init_is_idempotent(self, db_conn: aiosqlite.Connection):
        await init_db(db_conn)
        cursor = await db_conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        )
        tables = {row[0] for row in await cursor.fetchall()}
        assert {
            "users",
            "teams",
            "team_memberships",
            "projects",
            "tasks",
            "notifications",
        } <= tables

    async def test_create_store_group_makes_parent_dir(self, store_group: StoreGroup, tmp_db_path):
        assert tmp_db_path.parent.is_dir()


class TestUserStore:
    """UserStore CRUD"""

    async def test_create_and_lookup(self, store_group: StoreGroup):
        user = _user("u1")
        await store_group.user_store.create_user(user)
        await store_group.conn.commit()

        assert await store_group.user_store.get_user("u1") == user
        assert await store_group.user_store.get_user_by_username("name-u1") == user
        assert await store_group.user_store.get_user_by_email("u1@example.com") == user
        assert await store_group.user_store.get_user("missing") is None

    async def test_unique_username(self, store_group: StoreGroup):
        await store_group.user_store.create_user(_user("u1"))
        clash = _user("u2").model_copy(update={"username": "name-u1"})
        with pytest.raises(aiosqlite.IntegrityError):
            await store_group.user_store.create_user(clash)

    async def test_update_and_delete(self, store_group: StoreGroup):
        await store_group.user_store.create_user(_user("u1"))
        renamed = _user("u1").model_copy(update={"username": "renamed"})
        assert await store_group.user_store.update_user(renamed) is True
        fetched = await store_group.user_store.get_user("u1")
        assert fetched is not None and fetched.username == "renamed"

        assert await store_group.user_store.delete_user("u1") is True
        assert await store_group.user_store.delete_user("u1") is False


class TestMembershipStore:
    """MembershipStore 查询与约束"""

    async def test_composite_primary_key(self, store_group: StoreGroup):
        await store_group.user_store.create_user(_user("u1"))
        await store_group.team_store.create_team(_team("t1"))
        await store_group.membership_store.create_membership(_membership("u1", "t1"))
        with pytest.raises(aiosqlite.IntegrityError):
            await store_group.membership_store.create_membership(_membership("u1", "t1"))

    async def test_list_filters_by_status(self, store_group: StoreGroup):
        for uid in ("u1", "u2"):
            await store_group.user_store.create_user(_user(uid))
        await store_group.team_store.create_team(_team("t1"))
        await store_group.membership_store.create_membership(_membership("u1", "t1"))
        await store_group.membership_store.create_membership(
            _membership("u2", "t1", status=InvitationStatus.PENDING)
        )

        store = store_group.membership_store
        assert len(await store.list_memberships_for_team("t1")) == 2
        accepted = await store.list_memberships_for_team("t1", InvitationStatus.ACCEPTED)
        assert [m.user_id for m in accepted] == ["u1"]
        pending = await store.list_memberships_for_user("u2", InvitationStatus.PENDING)
        assert [m.team_id for m in pending] == ["t1"]

    async def test_count_owners_ignores_pending(self, store_group: StoreGroup):
        for uid in ("u1", "u2"):
            await store_group.user_store.create_user(_user(uid))
        await store_group.team_store.create_team(_team("t1"))
        await store_group.membership_store.create_membership(
            _membership("u1", "t1", role=Role.OWNER)
        )
        await store_group.membership_store.create_membership(
            _membership("u2", "t1", role=Role.OWNER, status=InvitationStatus.PENDING)
        )
        assert await store_group.membership_store.count_owners("t1") == 1

    async def test_list_team_ids_without_owner(self, store_group: StoreGroup):
        await store_group.user_store.create_user(_user("u1"))
        await store_group.team_store.create_team(_team("t1", "alpha"))
        await store_group.team_store.create_team(_team("t2", "beta"))
        await store_group.membership_store.create_membership(
            _membership("u1", "t1", role=Role.OWNER)
        )
        await store_group.membership_store.create_membership(_membership("u1", "t2"))
        assert await store_group.membership_store.list_team_ids_without_owner() == ["t2"]


class TestCascades:
    """外键级联行为"""

    async def test_delete_user_cascades(self, store_group: StoreGroup):
        for uid in ("u1", "u2"):
            await store_group.user_store.create_user(_user(uid))
        await store_group.team_store.create_team(_team("t1"))
        await store_group.membership_store.create_membership(_membership("u1", "t1"))
        await store_group.task_store.create_task(_task("k1", "u1"))
        await store_group.task_store.create_task(_task("k2", "u2", assignee_id="u1"))
        await store_group.notification_store.create_notification(
            Notification(
                notification_id="n1",
                recipient_id="u1",
                message="hi",
                sent_at=datetime.now(UTC),
            )
        )
        await store_group.conn.commit()

        await store_group.user_store.delete_user("u1")
        await store_group.conn.commit()

        assert await store_group.membership_store.get_membership("u1", "t1") is None
        assert await store_group.task_store.get_task("k1") is None
        # 被指派的任务保留，指派关系清空
        kept = await store_group.task_store.get_task("k2")
        assert kept is not None and kept.assignee_id is None
        assert await store_group.notification_store.get_notification("n1") is None

    async def test_delete_team_detaches_projects(self, store_group: StoreGroup):
        await store_group.team_store.create_team(_team("t1"))
        await store_group.project_store.create_project(
            Project(project_id="p1", name="Apollo", team_id="t1", created_at=datetime.now(UTC))
        )
        await store_group.team_store.delete_team("t1")

        project = await store_group.project_store.get_project("p1")
        assert project is not None and project.team_id is None

    async def test_delete_project_detaches_tasks(self, store_group: StoreGroup):
        await store_group.user_store.create_user(_user("u1"))
        await store_group.project_store.create_project(
            Project(project_id="p1", name="Apollo", created_at=datetime.now(UTC))
        )
        await store_group.task_store.create_task(_task("k1", "u1", project_id="p1"))
        await store_group.project_store.delete_project("p1")

        task = await store_group.task_store.get_task("k1")
        assert task is not None and task.project_id is None


class TestTaskStore:
    """TaskStore 读写"""

    async def test_round_trip_optional_fields(self, store_group: StoreGroup):
        await store_group.user_store.create_user(_user("u1"))
        due = datetime(2030, 1, 2, 3, 4, 5, tzinfo=UTC)
        task = _task("k1", "u1", description="详细说明", due_at=due, priority=Priority.HIGH)
        await store_group.task_store.create_task(task)

        fetched = await store_group.task_store.get_task("k1")
        assert fetched == task

    async def test_list_for_assignee(self, store_group: StoreGroup):
        for uid in ("u1", "u2"):
            await store_group.user_store.create_user(_user(uid))
        await store_group.task_store.create_task(_task("k1", "u1", assignee_id="u2"))
        await store_group.task_store.create_task(_task("k2", "u1"))

        assigned = await store_group.task_store.list_tasks_for_assignee("u2")
        assert [t.task_id for t in assigned] == ["k1"]
        assert len(await store_group.task_store.list_tasks()) == 2
