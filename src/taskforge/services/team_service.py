"""TeamService -- 团队、成员关系与邀请状态机

每对 (user, team) 的成员关系状态：
    NONE -> PENDING -> ACCEPTED -> (删除：移除/退出)
                    -> (删除：拒绝邀请)
REJECTED 不落库，拒绝邀请即删除记录，之后可以重新邀请。
role 与邀请状态正交，仅在 ACCEPTED 后可修改。

团队始终至少保留一名 ACCEPTED 的 OWNER：创建团队时与 OWNER 成员关系
同事务写入；移除成员和降级角色时在写锁内读取成员关系、
复核 OWNER 数量并写入，并发调用不会同时越过检查。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskforge.core.errors import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from taskforge.core.models import (
    InvitationStatus,
    NotificationType,
    Role,
    Team,
    User,
    UserTeamMembership,
)
from taskforge.core.result import service_operation
from taskforge.core.store import StoreGroup, constraint_columns, create_team_with_owner
from ulid import ULID

from .notification_service import NotificationService
from .validation import require_enum

log = structlog.get_logger()


class TeamService:
    """团队与成员关系业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        notification_service: NotificationService,
    ) -> None:
        self._stores = store_group
        self._notifications = notification_service

    # ------------------------------------------------------------------
    # 团队
    # ------------------------------------------------------------------

    @service_operation
    async def create_team(self, name: str, creator_id: str) -> Team:
        """创建团队，创建者自动成为 ACCEPTED 的 OWNER

        Raises (以失败结果返回):
            ValidationError: 名称为空
            ConflictError: 名称已存在
            NotFoundError: 创建者不存在
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("team name must not be empty")
        if await self._stores.team_store.get_team_by_name(name) is not None:
            raise ConflictError(f"team name already exists: {name}")
        if await self._stores.user_store.get_user(creator_id) is None:
            raise NotFoundError("user", creator_id)

        now = datetime.now(UTC)
        team = Team(team_id=str(ULID()), name=name, created_at=now)
        owner_membership = UserTeamMembership(
            user_id=creator_id,
            team_id=team.team_id,
            role=Role.OWNER,
            invitation_status=InvitationStatus.ACCEPTED,
            created_at=now,
            updated_at=now,
        )

        # 团队 + OWNER 成员关系单事务写入，任一失败整体回滚
        try:
            async with self._stores.write_lock:
                await create_team_with_owner(
                    self._stores.conn,
                    self._stores.team_store,
                    self._stores.membership_store,
                    team,
                    owner_membership,
                )
        except aiosqlite.IntegrityError as e:
            if self._is_team_name_conflict(e):
                raise ConflictError(f"team name already exists: {name}") from e
            raise

        log.info("team_created", team_id=team.team_id, creator_id=creator_id)
        return team

    @service_operation
    async def update_team(
        self,
        team_id: str,
        name: str,
        *,
        actor_id: str | None = None,
    ) -> Team:
        """重命名团队"""
        name = (name or "").strip()
        if not name:
            raise ValidationError("team name must not be empty")
        team = await self._get_team_or_raise(team_id)
        if actor_id is not None:
            await self._require_owner(actor_id, team_id)

        existing = await self._stores.team_store.get_team_by_name(name)
        if existing is not None and existing.team_id != team_id:
            raise ConflictError(f"team name already exists: {name}")

        updated = team.model_copy(update={"name": name})
        try:
            async with self._stores.transaction():
                await self._stores.team_store.update_team(updated)
        except aiosqlite.IntegrityError as e:
            if self._is_team_name_conflict(e):
                raise ConflictError(f"team name already exists: {name}") from e
            raise
        log.info("team_renamed", team_id=team_id)
        return updated

    @service_operation
    async def delete_team(self, team_id: str, *, actor_id: str | None = None) -> None:
        """删除团队（成员关系级联删除，所属项目解除团队归属）"""
        await self._get_team_or_raise(team_id)
        if actor_id is not None:
            await self._require_owner(actor_id, team_id)
        async with self._stores.transaction():
            await self._stores.team_store.delete_team(team_id)
        log.info("team_deleted", team_id=team_id, actor_id=actor_id)

    @service_operation
    async def get_team(self, team_id: str) -> Team:
        return await self._get_team_or_raise(team_id)

    @service_operation
    async def list_teams(self) -> list[Team]:
        return await self._stores.team_store.list_teams()

    # ------------------------------------------------------------------
    # 邀请状态机
    # ------------------------------------------------------------------

    @service_operation
    async def invite_user_to_team(
        self,
        user_id: str,
        team_id: str,
        role: Role = Role.MEMBER,
        *,
        actor_id: str | None = None,
    ) -> UserTeamMembership:
        """邀请用户加入团队，创建 PENDING 成员关系并发送邀请通知

        已存在任何状态的记录时拒绝重复邀请。
        actor_id 不为空时要求其为团队 OWNER。
        """
        role = require_enum(Role, role, "role")
        user = await self._stores.user_store.get_user(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        team = await self._get_team_or_raise(team_id)
        if actor_id is not None:
            await self._require_owner(actor_id, team_id)

        now = datetime.now(UTC)
        membership = UserTeamMembership(
            user_id=user_id,
            team_id=team_id,
            role=role,
            invitation_status=InvitationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self._stores.transaction():
                existing = await self._stores.membership_store.get_membership(user_id, team_id)
                if existing is not None:
                    raise ConflictError(
                        f"user {user_id} already has a membership in team {team_id}"
                    )
                await self._stores.membership_store.create_membership(membership)
        except aiosqlite.IntegrityError as e:
            # 其他连接写入的记录越过了存在性检查，由主键约束兜底
            if self._is_membership_conflict(e):
                raise ConflictError(
                    f"user {user_id} already has a membership in team {team_id}"
                ) from e
            raise

        log.info(
            "team_invitation_created",
            user_id=user_id,
            team_id=team_id,
            role=role.value,
            actor_id=actor_id,
        )
        await self._notifications.send(
            user_id,
            f"You have been invited to join the team '{team.name}' as a {role.value.lower()}.",
            related_entity_id=team_id,
            notification_type=NotificationType.TEAM_INVITATION,
        )
        return membership

    @service_operation
    async def accept_team_invitation(self, user_id: str, team_id: str) -> UserTeamMembership:
        """接受邀请：PENDING -> ACCEPTED，角色保持邀请时的值"""
        async with self._stores.transaction():
            membership = await self._get_pending_membership(user_id, team_id)
            accepted = membership.model_copy(
                update={
                    "invitation_status": InvitationStatus.ACCEPTED,
                    "updated_at": datetime.now(UTC),
                }
            )
            await self._stores.membership_store.update_membership(accepted)
        log.info("team_invitation_accepted", user_id=user_id, team_id=team_id)
        return accepted

    @service_operation
    async def reject_team_invitation(self, user_id: str, team_id: str) -> None:
        """拒绝邀请：删除 PENDING 记录，不保留 REJECTED 状态"""
        async with self._stores.transaction():
            await self._get_pending_membership(user_id, team_id)
            await self._stores.membership_store.delete_membership(user_id, team_id)
        log.info("team_invitation_rejected", user_id=user_id, team_id=team_id)

    # ------------------------------------------------------------------
    # 成员管理
    # ------------------------------------------------------------------

    @service_operation
    async def remove_user_from_team(
        self,
        user_id: str,
        team_id: str,
        *,
        actor_id: str | None = None,
    ) -> None:
        """移除成员（或撤回邀请）；用户可以移除自己（退出团队）

        不允许移除团队最后一名 ACCEPTED OWNER。
        """
        async with self._stores.transaction():
            membership = await self._get_membership_or_raise(user_id, team_id)
            if actor_id is not None and actor_id != user_id:
                await self._require_owner(actor_id, team_id)
            if membership.is_owner and await self._is_last_owner(team_id):
                raise InvalidStateError("cannot remove the last owner of the team")
            await self._stores.membership_store.delete_membership(user_id, team_id)
        log.info(
            "team_member_removed",
            user_id=user_id,
            team_id=team_id,
            actor_id=actor_id,
        )

    @service_operation
    async def update_team_member_role(
        self,
        user_id: str,
        team_id: str,
        new_role: Role,
        *,
        actor_id: str | None = None,
    ) -> UserTeamMembership:
        """修改成员角色；不允许将最后一名 OWNER 降级为 MEMBER"""
        new_role = require_enum(Role, new_role, "role")
        async with self._stores.transaction():
            membership = await self._get_membership_or_raise(user_id, team_id)
            if actor_id is not None:
                await self._require_owner(actor_id, team_id)
            if not membership.is_accepted:
                raise InvalidStateError("role can only be changed for accepted members")
            if (
                membership.is_owner
                and new_role != Role.OWNER
                and await self._is_last_owner(team_id)
            ):
                raise InvalidStateError("cannot demote the last owner of the team")

            updated = membership.model_copy(
                update={"role": new_role, "updated_at": datetime.now(UTC)}
            )
            await self._stores.membership_store.update_membership(updated)
        log.info(
            "team_member_role_updated",
            user_id=user_id,
            team_id=team_id,
            role=new_role.value,
            actor_id=actor_id,
        )
        return updated

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @service_operation
    async def is_team_owner(self, user_id: str, team_id: str) -> bool:
        """是否为团队中已接受邀请的 OWNER"""
        membership = await self._stores.membership_store.get_membership(user_id, team_id)
        return membership is not None and membership.is_owner

    @service_operation
    async def is_user_member_of_team(self, user_id: str, team_id: str) -> bool:
        """是否为团队中已接受邀请的成员（任意角色）"""
        membership = await self._stores.membership_store.get_membership(user_id, team_id)
        return membership is not None and membership.is_accepted

    @service_operation
    async def are_users_in_same_team(self, user_id_a: str, user_id_b: str) -> bool:
        """两名用户已接受的团队集合是否有交集"""
        teams_a = await self._accepted_team_ids(user_id_a)
        if not teams_a:
            return False
        teams_b = await self._accepted_team_ids(user_id_b)
        return not teams_a.isdisjoint(teams_b)

    @service_operation
    async def list_teammate_ids(self, user_id: str) -> set[str]:
        """与该用户共享至少一个 ACCEPTED 团队的其他用户 ID"""
        teammates: set[str] = set()
        for team_id in await self._accepted_team_ids(user_id):
            members = await self._stores.membership_store.list_memberships_for_team(
                team_id, InvitationStatus.ACCEPTED
            )
            teammates.update(m.user_id for m in members)
        teammates.discard(user_id)
        return teammates

    @service_operation
    async def get_teams_for_user(self, user_id: str) -> list[Team]:
        memberships = await self._stores.membership_store.list_memberships_for_user(
            user_id, InvitationStatus.ACCEPTED
        )
        teams: list[Team] = []
        for membership in memberships:
            team = await self._stores.team_store.get_team(membership.team_id)
            if team is not None:
                teams.append(team)
        return teams

    @service_operation
    async def get_users_in_team(self, team_id: str) -> list[User]:
        memberships = await self._stores.membership_store.list_memberships_for_team(
            team_id, InvitationStatus.ACCEPTED
        )
        users: list[User] = []
        for membership in memberships:
            user = await self._stores.user_store.get_user(membership.user_id)
            if user is not None:
                users.append(user)
        return users

    @service_operation
    async def get_team_memberships(self, team_id: str) -> list[UserTeamMembership]:
        """团队的全部成员关系（含 PENDING 邀请）"""
        return await self._stores.membership_store.list_memberships_for_team(team_id)

    @service_operation
    async def get_pending_invitations(self, user_id: str) -> list[UserTeamMembership]:
        return await self._stores.membership_store.list_memberships_for_user(
            user_id, InvitationStatus.PENDING
        )

    @service_operation
    async def get_membership(self, user_id: str, team_id: str) -> UserTeamMembership:
        return await self._get_membership_or_raise(user_id, team_id)

    # ------------------------------------------------------------------
    # 内部辅助
    # ------------------------------------------------------------------

    async def _get_team_or_raise(self, team_id: str) -> Team:
        team = await self._stores.team_store.get_team(team_id)
        if team is None:
            raise NotFoundError("team", team_id)
        return team

    async def _get_membership_or_raise(self, user_id: str, team_id: str) -> UserTeamMembership:
        membership = await self._stores.membership_store.get_membership(user_id, team_id)
        if membership is None:
            raise NotFoundError("membership", f"{user_id}@{team_id}")
        return membership

    async def _get_pending_membership(self, user_id: str, team_id: str) -> UserTeamMembership:
        membership = await self._get_membership_or_raise(user_id, team_id)
        if membership.invitation_status != InvitationStatus.PENDING:
            raise InvalidStateError(
                f"invitation is not pending: {membership.invitation_status.value}"
            )
        return membership

    async def _require_owner(self, actor_id: str, team_id: str) -> None:
        membership = await self._stores.membership_store.get_membership(actor_id, team_id)
        if membership is None or not membership.is_owner:
            raise AuthorizationError(f"user {actor_id} is not an owner of team {team_id}")

    async def _is_last_owner(self, team_id: str) -> bool:
        return await self._stores.membership_store.count_owners(team_id) <= 1

    async def _accepted_team_ids(self, user_id: str) -> set[str]:
        memberships = await self._stores.membership_store.list_memberships_for_user(
            user_id, InvitationStatus.ACCEPTED
        )
        return {m.team_id for m in memberships}

    @staticmethod
    def _is_team_name_conflict(error: aiosqlite.IntegrityError) -> bool:
        return "teams.name" in constraint_columns(error)

    @staticmethod
    def _is_membership_conflict(error: aiosqlite.IntegrityError) -> bool:
        return constraint_columns(error) == {
            "team_memberships.user_id",
            "team_memberships.team_id",
        }
