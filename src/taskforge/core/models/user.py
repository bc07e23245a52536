"""User Domain Model

username 与 email 全局唯一，由存储层唯一约束保证。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """用户"""

    user_id: str = Field(description="唯一标识，ULID 格式")
    username: str = Field(description="用户名（唯一）")
    email: str = Field(description="邮箱（唯一）")
    password_hash: str = Field(description="PBKDF2 密码哈希，格式 salt:hash")
    created_at: datetime = Field(description="注册时间")
