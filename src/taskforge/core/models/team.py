"""Team 与 UserTeamMembership Domain Model

成员关系以 (user_id, team_id) 为复合主键，同一对用户/团队最多一条记录。
团队创建后必须至少有一名 ACCEPTED 的 OWNER。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import InvitationStatus, Role


class Team(BaseModel):
    """团队"""

    team_id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="团队名称（唯一）")
    created_at: datetime = Field(description="创建时间")


class UserTeamMembership(BaseModel):
    """用户-团队成员关系（带角色和邀请状态的关联边）"""

    user_id: str = Field(description="成员用户 ID")
    team_id: str = Field(description="团队 ID")
    role: Role = Field(default=Role.MEMBER, description="团队内角色")
    invitation_status: InvitationStatus = Field(
        default=InvitationStatus.PENDING,
        description="邀请状态",
    )
    created_at: datetime = Field(description="创建时间（邀请时间）")
    updated_at: datetime = Field(description="最近一次状态/角色变更时间")

    @property
    def is_accepted(self) -> bool:
        return self.invitation_status == InvitationStatus.ACCEPTED

    @property
    def is_owner(self) -> bool:
        """是否为已接受邀请的 OWNER"""
        return self.is_accepted and self.role == Role.OWNER
