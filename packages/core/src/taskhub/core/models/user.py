"""User Domain Model

User 对外视图不包含 password 字段；
密码仅在认证和改密流程中以原始行的形式出现。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import UserRole


class User(BaseModel):
    """用户（已去除密码）"""

    user_id: int = Field(description="用户 ID")
    username: str = Field(description="用户名，全局唯一")
    role: UserRole = Field(default=UserRole.USER, description="角色")
    created_at: datetime = Field(description="创建时间")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserRef(BaseModel):
    """关联查询中嵌入的用户视图"""

    user_id: int | None = Field(default=None, description="用户 ID")
    username: str = Field(description="用户名")


class UserCreate(BaseModel):
    """新建用户请求"""

    username: str = Field(default="", description="用户名")
    password: str = Field(default="", description="明文密码，入库前哈希")
    role: UserRole = Field(default=UserRole.USER, description="角色")


class UserUpdate(BaseModel):
    """管理员更新用户请求，password 为空表示不修改"""

    username: str | None = None
    password: str | None = None
    role: UserRole | None = None


class UsernameAvailability(BaseModel):
    """用户名可用性检查结果"""

    available: bool
    message: str
