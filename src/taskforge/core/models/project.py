"""Project Domain Model"""

from datetime import datetime

from pydantic import BaseModel, Field


class Project(BaseModel):
    """项目，可选归属某个团队"""

    project_id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="项目名称")
    team_id: str | None = Field(default=None, description="所属团队 ID，None 表示无团队")
    created_at: datetime = Field(description="创建时间")
