"""UserService 测试 -- 注册、登录、资料维护"""

import pytest
from taskforge.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from taskforge.core.models import Priority, Visibility


class TestRegistration:
    """注册"""

    async def test_register_hashes_password(self, services):
        user = (
            await services.users.register_user("alice", "alice@example.com", "pw-123")
        ).unwrap()
        assert user.username == "alice"
        assert user.password_hash != "pw-123"
        assert ":" in user.password_hash

    @pytest.mark.parametrize(
        "username,email,password",
        [
            ("", "a@example.com", "pw"),
            ("alice", " ", "pw"),
            ("alice", "a@example.com", ""),
        ],
    )
    async def test_required_fields(self, services, username, email, password):
        result = await services.users.register_user(username, email, password)
        assert isinstance(result.error, ValidationError)

    async def test_duplicate_username_or_email(self, services, make_user):
        await make_user("alice")
        by_name = await services.users.register_user("alice", "other@example.com", "pw")
        by_email = await services.users.register_user("alicia", "alice@example.com", "pw")
        assert isinstance(by_name.error, ConflictError)
        assert isinstance(by_email.error, ConflictError)
        assert len((await services.users.list_users()).unwrap()) == 1


class TestAuthentication:
    """登录校验"""

    async def test_valid_credentials(self, services, make_user):
        alice = await make_user("alice", password="correct")
        user = (await services.users.authenticate("alice", "correct")).unwrap()
        assert user.user_id == alice.user_id

    async def test_wrong_password(self, services, make_user):
        await make_user("alice", password="correct")
        result = await services.users.authenticate("alice", "wrong")
        assert isinstance(result.error, AuthorizationError)

    async def test_unknown_user_same_error(self, services):
        result = await services.users.authenticate("nobody", "whatever")
        assert isinstance(result.error, AuthorizationError)
        assert result.error.message == "invalid username or password"

    async def test_blank_credentials(self, services):
        result = await services.users.authenticate(" ", "pw")
        assert isinstance(result.error, ValidationError)


class TestProfileMaintenance:
    """资料修改与删除"""

    async def test_update_user(self, services, make_user):
        alice = await make_user("alice")
        updated = (
            await services.users.update_user(alice.user_id, "alice2", "alice2@example.com")
        ).unwrap()
        assert updated.username == "alice2"
        fetched = (await services.users.get_user(alice.user_id)).unwrap()
        assert fetched.email == "alice2@example.com"

    async def test_update_keeps_own_values(self, services, make_user):
        alice = await make_user("alice")
        result = await services.users.update_user(alice.user_id, "alice", "alice@example.com")
        assert result.ok

    async def test_update_conflict(self, services, make_user):
        alice = await make_user("alice")
        await make_user("bob")
        result = await services.users.update_user(alice.user_id, "bob", "alice@example.com")
        assert isinstance(result.error, ConflictError)

    async def test_delete_user_cascades_tasks(self, services, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await services.tasks.create_task(
            title="t",
            creator_id=alice.user_id,
            priority=Priority.LOW,
            visibility=Visibility.PUBLIC,
        )
        assert (await services.users.delete_user(alice.user_id)).ok
        assert isinstance((await services.users.get_user(alice.user_id)).error, NotFoundError)
        assert (await services.tasks.get_all_visible_tasks(bob.user_id)).unwrap() == []

    async def test_delete_unknown(self, services):
        result = await services.users.delete_user("ghost")
        assert isinstance(result.error, NotFoundError)
